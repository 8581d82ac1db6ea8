from sqlalchemy.orm import Session
from models.log import Log

def write_log(db: Session, *, user_id, action, resource, resource_id=None, status="SUCCESS", ip=None, meta=None, commit=True):
    # commit=False lets the entry join the caller's open transaction (checkout, cancellation)
    entry = Log(
        user_id=user_id, action=action, resource=resource, resource_id=resource_id,
        status=status, ip=ip, meta=meta or {},
    )
    db.add(entry)
    if commit:
        db.commit()
    return entry

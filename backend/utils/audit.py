from sqlalchemy.orm import Session
from models.log import Log

def write_log(db: Session, *, action, resource, status="SUCCESS", user_id=None, actor=None,
              session_id=None, ip=None, meta=None, commit=True):
    # commit=False keeps the entry inside the caller's unit of work
    entry = Log(user_id=user_id, actor=actor, session_id=session_id, action=action,
                resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    if commit:
        db.commit()

def client_ip(request):
    return request.client.host if request.client else None

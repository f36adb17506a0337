from sqlalchemy.orm import Session
from dailygreens.core.errors import UserNotFound
from dailygreens.checkout.types import Profile
from dailygreens.db.models import User

def get_profile(db: Session, user_id: int) -> Profile:
    user = db.get(User, user_id)
    if not user:
        raise UserNotFound(user_id)
    p = user.profile
    return Profile(
        full_name=(p.full_name if p else None) or "",
        email=user.email or "",
        address=(p.address if p else None) or "",
        phone=(p.phone_number if p else None) or "",
    )

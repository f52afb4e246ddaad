from sqlalchemy.orm import Session
from models.users import User


def lock_user(db: Session, user_id: int) -> User:
    """
    Take a row lock on the user for the rest of the current transaction.

    Token issuance and payment fulfillment are read-then-write sequences
    scoped to one user; holding this lock serialises them across
    concurrent requests. Backends without row locks (SQLite) ignore
    FOR UPDATE and rely on the unique constraints instead.
    """
    return (
        db.query(User)
        .filter(User.id == user_id)
        .with_for_update()
        .populate_existing()
        .one()
    )

"""User repository - Database operations for users"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def count_by_role(db: Session, role: str) -> int:
        return db.query(User).filter(User.role == role).count()

    @staticmethod
    def search_users(db: Session, search: Optional[str] = None, role: Optional[str] = None) -> Query:
        """Filtered user query, newest first"""
        query = db.query(User)

        if search and search.strip():
            search_term = f"%{search.strip().lower()}%"
            query = query.filter(or_(User.name.ilike(search_term), User.email.ilike(search_term)))

        if role:
            query = query.filter(User.role == role)

        return query.order_by(User.created_at.desc())

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user with the supplied fields only"""
        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        db.delete(user)
        db.commit()

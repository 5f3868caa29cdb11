from sqlalchemy.orm import Session
from storefront.data.models.user import UserModel
from storefront.data.unit_of_work import UnitOfWork
from storefront.repos.user_repo import UserRepo
from storefront.domain.errors import NotFound
from storefront.domain.schemas import UserCreate, UserRead
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        """Idempotent on id: an existing user is returned unchanged."""
        existing = self.repo.get_user(payload.id)
        if existing:
            return UserRead.model_validate(existing)

        with UnitOfWork(self.db, name=f"create user={payload.id}"):
            user = self.repo.add_user(UserModel(id=payload.id, name=payload.name, role=payload.role))
        logger.info(f"User {user.id} created with role {user.role}")
        return UserRead.model_validate(user)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("User not found")
        return UserRead.model_validate(user)

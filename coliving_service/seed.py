"""Seed an admin account, a few rooms and the default contract template."""
import logging
import os

from shared.core.database import Base, SessionLocal, engine
from shared.models.users import User
from shared.utils.enums import UserRole, UserStatus
from coliving_service.app import models  # noqa: F401
from coliving_service.app.enum.coliving_enum import BedType, KitchenType, RoomStatus
from coliving_service.app.models.contract_templates import ContractTemplate
from coliving_service.app.models.rooms import Room
from coliving_service.app.services.contract_template_engine import DEFAULT_CONTRACT_BODY

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s]: %(message)s")
logger = logging.getLogger("seed")

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@coliving.fr")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "ChangeMe123!")

ROOMS = [
    {"name": "Chambre Lumière", "number": 1, "price": 520, "surface": 12, "floor": 1,
     "has_balcony": False, "bed_type": BedType.DOUBLE.value},
    {"name": "Chambre Jardin", "number": 2, "price": 560, "surface": 14, "floor": 0,
     "has_balcony": False, "bed_type": BedType.QUEEN.value},
    {"name": "Chambre Terrasse", "number": 3, "price": 610, "surface": 16, "floor": 2,
     "has_balcony": True, "bed_type": BedType.QUEEN.value},
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        if not db.query(User).filter(User.email == ADMIN_EMAIL).first():
            admin = User(
                email=ADMIN_EMAIL,
                first_name="Admin",
                last_name="Coliving",
                role=UserRole.ADMIN.value,
                status=UserStatus.ACTIVE.value
            )
            admin.set_password(ADMIN_PASSWORD)
            db.add(admin)
            logger.info(f"Admin {ADMIN_EMAIL} created")
        else:
            logger.info(f"Admin {ADMIN_EMAIL} already exists")

        for room_data in ROOMS:
            if db.query(Room).filter(Room.number == room_data["number"]).first():
                continue
            db.add(Room(
                **room_data,
                description=f"{room_data['name']}, meublée et lumineuse, au cœur de la colocation.",
                has_private_bathroom=False,
                has_desk=True,
                has_closet=True,
                has_window=True,
                kitchen_type=KitchenType.SHARED.value,
                images=[],
                status=RoomStatus.AVAILABLE.value,
                is_active=True
            ))
            logger.info(f"Room {room_data['number']} created")

        if not db.query(ContractTemplate).filter(ContractTemplate.is_default.is_(True)).first():
            db.add(ContractTemplate(
                name="Bail colocation meublée",
                description="Modèle par défaut",
                is_default=True,
                pdf_data=DEFAULT_CONTRACT_BODY
            ))
            logger.info("Default contract template created")

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()

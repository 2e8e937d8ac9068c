from sqlalchemy.orm import Session
from typing import List, Optional

from mesas.models.turn import Turn


def get_turn(db: Session, building: str, turn_id: int) -> Optional[Turn]:
    return (
        db.query(Turn)
        .filter(Turn.id == turn_id, Turn.building == building)
        .first()
    )


def get_turns(db: Session, building: str) -> List[Turn]:
    return db.query(Turn).filter(Turn.building == building).order_by(Turn.id).all()


def count_turns(db: Session, building: str) -> int:
    return db.query(Turn).filter(Turn.building == building).count()


def create_turns(db: Session, building: str, names) -> List[Turn]:
    db_turns = [Turn(building=building, name=name) for name in names]
    db.add_all(db_turns)
    db.commit()
    return db_turns

from sqlalchemy.orm import Session
from typing import List, Optional

from mesas.models.table import Table


def get_table(db: Session, building: str, table_id: int) -> Optional[Table]:
    return (
        db.query(Table)
        .filter(Table.id == table_id, Table.building == building)
        .first()
    )


def get_tables(db: Session, building: str) -> List[Table]:
    return (
        db.query(Table)
        .filter(Table.building == building)
        .order_by(Table.number)
        .all()
    )


def count_tables(db: Session, building: str) -> int:
    return db.query(Table).filter(Table.building == building).count()


def create_tables(db: Session, building: str, seeds) -> List[Table]:
    db_tables = [
        Table(building=building, number=seed.number, capacity=seed.capacity)
        for seed in seeds
    ]
    db.add_all(db_tables)
    db.commit()
    return db_tables

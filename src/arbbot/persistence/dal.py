from __future__ import annotations

"""Trade journal stored with SQLModel.

Records every decision that reached execution together with its legs.
Balances are deliberately absent: each run starts from its configured
allocation.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional
import os

from sqlmodel import SQLModel, Field, create_engine, Session, select

from ..types import Side, Venue

if TYPE_CHECKING:  # pragma: no cover
    from ..engine.instruction import TradeInstruction


class DBDecision(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    symbol: str
    direction: str
    ask_price: str
    bid_price: str
    quantity: str
    total_cost: str
    profit: str
    status: str = "pending"
    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class DBLeg(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    decision_id: int = Field(foreign_key="dbdecision.id", index=True)
    venue: str
    side: str
    quantity: str
    price: str
    ok: bool
    error: Optional[str] = None
    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class DAL:
    """Handle SQLite persistence."""

    def __init__(self, path: str) -> None:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self.engine = create_engine(
            f"sqlite:///{path}", connect_args={"check_same_thread": False}
        )
        SQLModel.metadata.create_all(self.engine)

    def add_decision(self, profit, instruction: "TradeInstruction") -> DBDecision:
        row = DBDecision(
            symbol=instruction.symbol.value,
            direction=instruction.direction,
            ask_price=str(instruction.ask_price),
            bid_price=str(instruction.bid_price),
            quantity=str(instruction.quantity),
            total_cost=str(instruction.total_cost),
            profit=str(profit),
        )
        with Session(self.engine) as session:
            session.add(row)
            session.commit()
            session.refresh(row)
        return row

    def set_status(self, decision_id: int, status: str) -> None:
        with Session(self.engine) as session:
            row = session.get(DBDecision, decision_id)
            if row is None:
                raise KeyError(decision_id)
            row.status = status
            session.add(row)
            session.commit()

    def add_leg(
        self,
        decision_id: int,
        venue: Venue,
        side: Side,
        quantity,
        price,
        error: Optional[str] = None,
    ) -> DBLeg:
        row = DBLeg(
            decision_id=decision_id,
            venue=venue.value,
            side=side.value,
            quantity=str(quantity),
            price=str(price),
            ok=error is None,
            error=error,
        )
        with Session(self.engine) as session:
            session.add(row)
            session.commit()
            session.refresh(row)
        return row

    def list_decisions(self) -> List[DBDecision]:
        with Session(self.engine) as session:
            return session.exec(select(DBDecision).order_by(DBDecision.id)).all()

    def list_legs(self, decision_id: Optional[int] = None) -> List[DBLeg]:
        with Session(self.engine) as session:
            stmt = select(DBLeg).order_by(DBLeg.id)
            if decision_id is not None:
                stmt = stmt.where(DBLeg.decision_id == decision_id)
            return session.exec(stmt).all()

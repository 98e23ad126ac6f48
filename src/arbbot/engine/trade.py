"""Two-legged trade execution and settlement."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Mapping, Optional, Tuple

from prometheus_client import Counter

from .instruction import TradeInstruction
from .ledger import BalanceLedger, apply
from ..errors import ExecutionError, SettlementError
from ..exchange import AbstractConnector, ExecutionResult
from ..persistence import DAL
from ..types import Side, Venue


logger = logging.getLogger(__name__)

LEG_RESULTS = Counter("arb_legs", "Executed trade legs", ["venue", "side", "status"])
OPEN_EXPOSURE = Counter(
    "arb_open_exposure", "Legs confirmed while the opposite leg failed", ["venue"]
)


@dataclass
class Settlement:
    profit: Decimal
    instruction: TradeInstruction
    legs: Tuple[ExecutionResult, ExecutionResult]
    ledger: BalanceLedger


@dataclass
class TradeEngine:
    """Run both legs of an instruction and settle once both are confirmed.

    A failed leg abandons the instruction: the ledger is left as it was and
    a :class:`SettlementError` is raised. A leg that did go through on the
    other venue is reported as open exposure; no unwind is attempted.
    """

    connectors: Mapping[Venue, AbstractConnector]
    journal: Optional[DAL] = None
    settled: List[Settlement] = field(default_factory=list)

    def __post_init__(self) -> None:
        for venue in Venue:
            conn = self.connectors.get(venue)
            if conn is None:
                raise ValueError(f"no connector for {venue.value}")
            if conn.venue is not venue:
                raise ValueError(f"connector for {conn.venue.value} mapped to {venue.value}")

    async def execute(
        self,
        instruction: TradeInstruction,
        ledger: BalanceLedger,
        profit: Decimal = Decimal("0"),
    ) -> BalanceLedger:
        decision_id = None
        if self.journal is not None:
            decision_id = self.journal.add_decision(profit, instruction).id

        legs = (
            (instruction.short_venue, Side.SHORT, instruction.bid_price),
            (instruction.long_venue, Side.LONG, instruction.ask_price),
        )
        outcomes = await asyncio.gather(
            *(
                self.connectors[venue].execute_leg(
                    side, instruction.symbol, instruction.quantity, price
                )
                for venue, side, price in legs
            ),
            return_exceptions=True,
        )

        confirmed: List[ExecutionResult] = []
        failures: List[BaseException] = []
        unexpected: Optional[BaseException] = None
        for (venue, side, price), outcome in zip(legs, outcomes):
            error = None
            if isinstance(outcome, ExecutionResult):
                confirmed.append(outcome)
                LEG_RESULTS.labels(venue.value, side.value, "ok").inc()
            else:
                failures.append(outcome)
                error = str(outcome) or type(outcome).__name__
                LEG_RESULTS.labels(venue.value, side.value, "failed").inc()
                logger.error("%s leg on %s failed: %s", side.value, venue.value, outcome)
                # anything other than a venue rejection is a bug; surfaced once accounted for
                if unexpected is None and not isinstance(outcome, ExecutionError):
                    unexpected = outcome
            if decision_id is not None:
                self.journal.add_leg(
                    decision_id, venue, side, instruction.quantity, price, error
                )

        if failures:
            for result in confirmed:
                OPEN_EXPOSURE.labels(result.venue.value).inc()
                logger.error(
                    "open exposure: %s %s %s@%s on %s left without its counter leg",
                    result.side.value,
                    result.symbol.value,
                    result.quantity,
                    result.price,
                    result.venue.value,
                )
            if decision_id is not None:
                self.journal.set_status(decision_id, "failed")
            if unexpected is not None:
                raise unexpected
            raise SettlementError(
                instruction,
                tuple(r.venue for r in confirmed),
                tuple(failures),
            )

        new_ledger = apply(ledger, instruction)
        self.settled.append(
            Settlement(profit, instruction, (confirmed[0], confirmed[1]), new_ledger)
        )
        if decision_id is not None:
            self.journal.set_status(decision_id, "settled")
        logger.info("settled %s: %s", instruction.direction, new_ledger.as_dict())
        return new_ledger

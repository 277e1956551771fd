"""Per-node communication statistics: delays, throughput, counters."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import TextIO

from .datastructs import Flit, FlitType


@dataclass
class CommHistory:
    """Everything received at a node from one source."""

    src_id: int
    delays: list[float] = field(default_factory=list)
    total_received_flits: int = 0
    last_received_flit_time: float = 0.0


def _g(value: float) -> str:
    return f"{value:g}"


class Stats:
    """Statistics collected at a destination node."""

    def __init__(self, node_id: int, warm_up_time: float = 0.0, reset_time: float = 0.0):
        self.node_id = node_id
        self.warm_up_time = warm_up_time
        self.reset_time = reset_time
        self._histories: dict[int, CommHistory] = {}

    @property
    def histories(self) -> list[CommHistory]:
        return list(self._histories.values())

    def _history(self, src_id: int) -> CommHistory:
        try:
            return self._histories[src_id]
        except KeyError:
            raise KeyError(f"no communication received from source {src_id}") from None

    def received_flit(self, arrival_time: float, flit: Flit) -> None:
        """Record a flit consumed at this node."""
        if arrival_time - self.reset_time < self.warm_up_time:
            return
        history = self._histories.setdefault(flit.src_id, CommHistory(flit.src_id))
        if flit.flit_type is FlitType.HEAD:
            history.delays.append(arrival_time - flit.timestamp)
        history.total_received_flits += 1
        history.last_received_flit_time = arrival_time - self.warm_up_time

    def average_delay(self, src_id: int | None = None) -> float:
        """Average packet delay in cycles, for one source or for all of them."""
        if src_id is not None:
            delays = self._history(src_id).delays
            return sum(delays) / len(delays) if delays else math.nan
        packets = self.received_packets()
        if packets == 0:
            return math.nan
        total = sum(
            len(h.delays) * self.average_delay(h.src_id)
            for h in self._histories.values()
            if h.delays
        )
        return total / packets

    def max_delay(self, src_id: int | None = None) -> float:
        """Largest packet delay, or -1.0 when no packet was seen."""
        if src_id is not None:
            return max(self._history(src_id).delays, default=-1.0)
        return max(
            (self.max_delay(h.src_id) for h in self._histories.values() if h.delays),
            default=-1.0,
        )

    def average_throughput(self, current_cycle: float, src_id: int | None = None) -> float:
        """Flits per cycle received so far, for one source or summed over all."""
        if src_id is None:
            return sum(
                avg
                for avg in (
                    self.average_throughput(current_cycle, h.src_id)
                    for h in self._histories.values()
                )
                if avg > 0.0
            )
        history = self._history(src_id)
        cycles = int(current_cycle - self.warm_up_time - self.reset_time)
        if history.total_received_flits == 0:
            return -1.0
        if cycles == 0:
            return math.inf
        return history.total_received_flits / cycles

    def received_packets(self) -> int:
        return sum(len(h.delays) for h in self._histories.values())

    def received_flits(self) -> int:
        return sum(h.total_received_flits for h in self._histories.values())

    def total_communications(self) -> int:
        return len(self._histories)

    def communication_energy(self, src_id: int, dst_id: int) -> float:
        """Energy of a communication; no model is available, so always -1.0."""
        return -1.0

    def show_stats(
        self,
        curr_node: int,
        current_cycle: float,
        out: TextIO | None = None,
        header: bool = False,
    ) -> None:
        """Write a per-source table and the aggregated figures to ``out``."""
        out = sys.stdout if out is None else out
        if header:
            out.write(
                "%"
                f"{'src':>5}{'dst':>5}{'delay avg':>10}{'delay max':>10}"
                f"{'throughput':>15}{'energy':>13}{'received':>12}{'received':>12}\n"
            )
            out.write(
                "%"
                f"{'':>5}{'':>5}{'cycles':>10}{'cycles':>10}"
                f"{'flits/cycle':>15}{'Joule':>13}{'packets':>12}{'flits':>12}\n"
            )
        for h in self._histories.values():
            out.write(
                " "
                f"{h.src_id:>5}{curr_node:>5}"
                f"{_g(self.average_delay(h.src_id)):>10}"
                f"{_g(self.max_delay(h.src_id)):>10}"
                f"{_g(self.average_throughput(current_cycle, h.src_id)):>15}"
                f"{_g(self.communication_energy(h.src_id, curr_node)):>13}"
                f"{len(h.delays):>12}{h.total_received_flits:>12}\n"
            )
        out.write(f"% Aggregated average delay (cycles): {_g(self.average_delay())}\n")
        out.write(
            "% Aggregated average throughput (flits/cycle): "
            f"{_g(self.average_throughput(current_cycle))}\n"
        )
"""Switch reservation table: which input/VC owns which output port."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ReservationError(RuntimeError):
    """Raised on an illegal reservation or on releasing an unknown one."""


class ReservationStatus(Enum):
    AVAILABLE = "RT_AVAILABLE"
    ALREADY_SAME = "RT_ALREADY_SAME"
    OUTVC_BUSY = "RT_OUTVC_BUSY"
    ALREADY_OTHER_OUT = "RT_ALREADY_OTHER_OUT"


@dataclass(frozen=True)
class Reservation:
    """An input port together with the virtual channel it uses."""

    input: int
    vc: int


@dataclass
class _Entry:
    reservations: list[Reservation] = field(default_factory=list)
    index: int = 0


class ReservationTable:
    """Per-output lists of reservations served round robin."""

    def __init__(self, n_outputs: int):
        self.n_outputs = n_outputs
        self._entries = [_Entry() for _ in range(n_outputs)]

    def _entry(self, port_out: int) -> _Entry:
        if not 0 <= port_out < self.n_outputs:
            raise ValueError(f"output port {port_out} out of range")
        return self._entries[port_out]

    def is_not_reserved(self, port_out: int) -> bool:
        return not self._entry(port_out).reservations

    def get_reservations(self, port_in: int) -> list[tuple[int, int]]:
        """(output, vc) pairs whose currently served reservation comes from ``port_in``."""
        result = []
        for output, entry in enumerate(self._entries):
            if entry.reservations:
                current = entry.reservations[entry.index]
                if current.input == port_in:
                    result.append((output, current.vc))
        return result

    def check_reservation(self, reservation: Reservation, port_out: int) -> ReservationStatus:
        """Tell whether ``reservation`` could be placed on ``port_out``."""
        target = self._entry(port_out)
        for output, entry in enumerate(self._entries):
            if output != port_out and reservation in entry.reservations:
                return ReservationStatus.ALREADY_OTHER_OUT
        for existing in target.reservations:
            if existing == reservation:
                return ReservationStatus.ALREADY_SAME
            if existing.input != reservation.input and existing.vc == reservation.vc:
                return ReservationStatus.OUTVC_BUSY
        return ReservationStatus.AVAILABLE

    def reserve(self, reservation: Reservation, port_out: int) -> None:
        status = self.check_reservation(reservation, port_out)
        if status is not ReservationStatus.AVAILABLE:
            raise ReservationError(
                f"cannot reserve output {port_out} for {reservation}: {status.value}"
            )
        self._entries[port_out].reservations.append(reservation)

    def release(self, reservation: Reservation, port_out: int) -> None:
        entry = self._entry(port_out)
        try:
            removed = entry.reservations.index(reservation)
        except ValueError:
            raise ReservationError(
                f"no reservation {reservation} on output {port_out}"
            ) from None
        del entry.reservations[removed]
        if removed < entry.index:
            entry.index -= 1
        elif entry.index >= len(entry.reservations):
            entry.index = 0

    def update_index(self) -> None:
        """Move every output on to its next reservation."""
        for entry in self._entries:
            if entry.reservations:
                entry.index = (entry.index + 1) % len(entry.reservations)

    def dump(self) -> str:
        """Render the table, one output per line."""
        lines = []
        for output, entry in enumerate(self._entries):
            items = "".join(f"<{r.input},{r.vc}>, " for r in entry.reservations)
            lines.append(f"{output}: {items} | {entry.index}\n")
        return "".join(lines)
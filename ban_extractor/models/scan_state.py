# Path: ban_extractor/models/scan_state.py
"""
Scan State

Per-run state of the record matcher. One ScanState is created for each
extraction and is never shared between runs.
"""

from dataclasses import dataclass, field
from enum import Enum


class ScanPhase(Enum):
    """
    Phases of the record matcher.

    Phases:
        IDLE: Outside any record
        BUFFERING: Inside a candidate record, content held in memory
        ABANDONED: Inside a record whose BAN did not match, content ignored
        COMMITTED: BAN matched, content written straight to the output
        DONE_MATCHED: Matched record closed, scan stopped
        DONE_EXHAUSTED: Input ended without a match
    """
    IDLE = "IDLE"
    BUFFERING = "BUFFERING"
    ABANDONED = "ABANDONED"
    COMMITTED = "COMMITTED"
    DONE_MATCHED = "DONE_MATCHED"
    DONE_EXHAUSTED = "DONE_EXHAUSTED"

    def __str__(self) -> str:
        return self.value

    @property
    def is_terminal(self) -> bool:
        return self in (ScanPhase.DONE_MATCHED, ScanPhase.DONE_EXHAUSTED)


@dataclass
class ScanState:
    """
    Mutable state of one scan.

    Attributes:
        phase: Current matcher phase
        element_count: Open and close events seen so far (diagnostic only)
        identifier_depth: Currently open identifier elements
        pending_identifier: Next character data belongs directly to an
            identifier element
        open_elements: Stack of currently open element names
        record_depth: Stack size right after the current record opened
        buffer: Serialized text of the candidate record not yet committed
        records_scanned: Records opened so far
        identifiers_seen: Identifier values compared so far
    """
    phase: ScanPhase = ScanPhase.IDLE
    element_count: int = 0
    identifier_depth: int = 0
    pending_identifier: bool = False
    open_elements: list[str] = field(default_factory=list)
    record_depth: int = 0
    buffer: list[str] = field(default_factory=list)
    records_scanned: int = 0
    identifiers_seen: int = 0

    @property
    def is_committed(self) -> bool:
        """Whether the wanted BAN has been seen. Never reverts."""
        return self.phase in (ScanPhase.COMMITTED, ScanPhase.DONE_MATCHED)

    @property
    def is_done(self) -> bool:
        return self.phase.is_terminal

    def start_record(self) -> None:
        """Begin a new candidate record at the current stack depth."""
        self.phase = ScanPhase.BUFFERING
        self.buffer.clear()
        self.identifier_depth = 0
        self.pending_identifier = False
        self.record_depth = len(self.open_elements)
        self.records_scanned += 1

    def leave_record(self) -> None:
        """Drop the candidate record and return to IDLE."""
        self.phase = ScanPhase.IDLE
        self.buffer.clear()
        self.identifier_depth = 0
        self.pending_identifier = False
        self.record_depth = 0


__all__ = ['ScanPhase', 'ScanState']

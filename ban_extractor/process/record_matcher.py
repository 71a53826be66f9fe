# Path: ban_extractor/process/record_matcher.py
"""
Record Match State Machine

Consumes structural events one at a time and decides which bytes belong to
the wanted record.

A record opens with the record tag. Its content is serialized into an
in-memory buffer until the identifier element is seen:
- identifier text equals the wanted BAN: the buffer is written out behind
  an XML declaration and the rest of the record streams straight through
- identifier element closes without a match: the buffer is dropped and
  the remainder of the record is ignored

The first matching record wins. As soon as it closes the matcher reports
done and the caller stops reading input.
"""

from typing import Callable, Optional, TextIO

from ..constants import XML_DECLARATION
from ..core.logger import get_process_logger
from ..models.events import ElementClose, ElementOpen, StructuralEvent, Text
from ..models.scan_state import ScanPhase, ScanState
from .serializer import render_close, render_open, render_text


logger = get_process_logger('record_matcher')

IdentifierObserver = Callable[[str], None]


class RecordMatcher:
    """
    Event-driven matcher for one extraction run.

    Example:
        matcher = RecordMatcher(
            record_tag='att:MixedBillService',
            identifier_tag='TITAN_BAN',
            identifier='1002',
            writer=output
        )
        for event in events:
            if matcher.feed(event):
                break
        matcher.finish()
        print(matcher.state.is_committed)
    """

    def __init__(
        self,
        record_tag: str,
        identifier_tag: str,
        identifier: str,
        writer: TextIO,
        observer: Optional[IdentifierObserver] = None,
        state: Optional[ScanState] = None
    ):
        """
        Initialize record matcher.

        Args:
            record_tag: Qualified name of the element enclosing one record
            identifier_tag: Qualified name of the element holding the BAN
            identifier: BAN to extract
            writer: Text sink for the extracted document
            observer: Called with the text of every identifier element seen,
                compared or not
            state: Scan state to drive (a fresh one by default)
        """
        self.record_tag = record_tag
        self.identifier_tag = identifier_tag
        self.identifier = identifier
        self.writer = writer
        self.observer = observer
        self.state = state if state is not None else ScanState()

    def feed(self, event: StructuralEvent) -> bool:
        """
        Consume one event.

        Args:
            event: Next event in document order

        Returns:
            True once the matched record has been closed and written
        """
        state = self.state
        if state.is_done:
            return True

        if isinstance(event, ElementOpen):
            state.element_count += 1
            state.open_elements.append(event.name)
            self._on_open(event)
        elif isinstance(event, ElementClose):
            state.element_count += 1
            self._on_close(event)
            state.open_elements.pop()
        elif isinstance(event, Text):
            self._on_text(event)

        return state.is_done

    def finish(self) -> ScanState:
        """
        Mark the end of input.

        Returns:
            Final scan state
        """
        state = self.state
        if state.phase is ScanPhase.COMMITTED:
            state.phase = ScanPhase.DONE_MATCHED
        elif not state.is_done:
            state.phase = ScanPhase.DONE_EXHAUSTED
            state.buffer.clear()
        logger.debug(
            f"Scan finished: phase={state.phase}, records={state.records_scanned}, "
            f"identifiers={state.identifiers_seen}, elements={state.element_count}"
        )
        return state

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_open(self, event: ElementOpen) -> None:
        state = self.state
        # Tracked in every phase so the observer sees all identifiers
        state.pending_identifier = event.name == self.identifier_tag

        if state.phase is ScanPhase.IDLE:
            if event.name == self.record_tag:
                state.start_record()
                self._emit(render_open(event))
            return

        if state.phase is ScanPhase.ABANDONED:
            return

        if state.pending_identifier:
            state.identifier_depth += 1
        self._emit(render_open(event))

    def _on_text(self, event: Text) -> None:
        state = self.state

        if state.pending_identifier:
            if self.observer is not None:
                self.observer(event.data)
            if state.phase is ScanPhase.BUFFERING:
                state.identifiers_seen += 1
                if event.data == self.identifier:
                    self._commit()

        if state.phase in (ScanPhase.BUFFERING, ScanPhase.COMMITTED):
            self._emit(render_text(event))

    def _on_close(self, event: ElementClose) -> None:
        state = self.state
        closes_record = (
            event.name == self.record_tag
            and len(state.open_elements) == state.record_depth
        )
        if event.name == self.identifier_tag:
            state.pending_identifier = False

        if state.phase is ScanPhase.IDLE:
            return

        if state.phase is ScanPhase.ABANDONED:
            if closes_record:
                state.leave_record()
            return

        if event.name == self.identifier_tag and state.identifier_depth > 0:
            state.identifier_depth -= 1
            if state.identifier_depth == 0 and state.phase is ScanPhase.BUFFERING:
                self._abandon()
                return

        self._emit(render_close(event))

        if closes_record:
            if state.phase is ScanPhase.COMMITTED:
                state.phase = ScanPhase.DONE_MATCHED
                logger.debug(f"Record for BAN {self.identifier} closed, stopping scan")
            else:
                state.leave_record()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _commit(self) -> None:
        state = self.state
        state.phase = ScanPhase.COMMITTED
        self.writer.write(XML_DECLARATION)
        self.writer.write(''.join(state.buffer))
        state.buffer.clear()
        logger.debug(f"BAN {self.identifier} matched in record {state.records_scanned}")

    def _abandon(self) -> None:
        state = self.state
        state.phase = ScanPhase.ABANDONED
        state.buffer.clear()
        state.pending_identifier = False

    def _emit(self, text: str) -> None:
        if self.state.phase is ScanPhase.COMMITTED:
            self.writer.write(text)
        else:
            self.state.buffer.append(text)


__all__ = ['RecordMatcher', 'IdentifierObserver']

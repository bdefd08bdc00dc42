"""
Streaming File-Block Parser
Rebuilds generated files from an LLM token stream as soon as each one is complete

Stream format (one block per file, markers may be split across fragments):

    FILE:src/index.js
    LANGUAGE:javascript
    CONTENT:
    console.log("Hello");
    ENDFILE

Flow:
1. step() consumes one fragment and returns the new snapshot plus events
2. finish() flushes an unterminated file and emits DoneEvent
3. StreamingFileBlockParser drives step()/finish() over sync or async
   fragment sources and logs the diagnostics

step() and finish() are pure: no I/O, no logging, input snapshot untouched.
Malformed marker sequences never raise; they come back as ParseIssue.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import (
    Any, AsyncGenerator, AsyncIterable, Dict, Iterable, Iterator, List,
    Optional, Tuple, Union
)

from vibecoding.core.config import settings
from vibecoding.core.logging_config import logger
from vibecoding.utils.file_extensions import ensure_file_extension


FILE_MARKER = "FILE:"
LANGUAGE_MARKER = "LANGUAGE:"
CONTENT_MARKER = "CONTENT:"
END_MARKER = "ENDFILE"

HEADER_MARKERS = (FILE_MARKER, LANGUAGE_MARKER, CONTENT_MARKER, END_MARKER)
STRAY_MARKERS = (LANGUAGE_MARKER, CONTENT_MARKER, END_MARKER)

# Longest partial marker that can sit at the end of the buffer
_MARKER_TAIL = max(len(m) for m in HEADER_MARKERS) - 1


class ParserState(Enum):
    """Position of the parser inside a file block"""
    IDLE = "idle"
    FILE_OPEN = "file_open"
    LANGUAGE_OPEN = "language_open"
    CONTENT_OPEN = "content_open"


class ParseIssueKind(Enum):
    """Recoverable problems found while parsing"""
    MALFORMED_MARKER = "malformed_marker"
    UNTERMINATED_FILE = "unterminated_file"
    OVERSIZED_CONTENT = "oversized_content"


@dataclass
class CodeFile:
    """A generated file"""
    path: str
    content: str
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "content": self.content, "language": self.language}


@dataclass
class ProgressEvent:
    """A new file's path is known, content still streaming"""
    path: str
    type: str = field(default="progress", init=False)


@dataclass
class FileCompleteEvent:
    """A file block has been closed (or flushed at end of stream)"""
    file: CodeFile
    type: str = field(default="file", init=False)


@dataclass
class DoneEvent:
    """The stream ended; no further events follow"""
    file_count: int = 0
    type: str = field(default="done", init=False)


ParserEvent = Union[ProgressEvent, FileCompleteEvent, DoneEvent]


@dataclass
class ParseIssue:
    """Diagnostic for a recoverable parse problem"""
    kind: ParseIssueKind
    message: str
    path: Optional[str] = None


@dataclass
class ParserSnapshot:
    """Complete parser state between two fragments"""
    state: ParserState = ParserState.IDLE
    buffer: str = ""
    path: Optional[str] = None
    language: Optional[str] = None
    scan_from: int = 0  # ENDFILE search resumes here inside CONTENT_OPEN
    oversize_reported: bool = False
    file_count: int = 0


@dataclass
class StepResult:
    """Output of step() / finish()"""
    snapshot: ParserSnapshot
    events: List[ParserEvent] = field(default_factory=list)
    issues: List[ParseIssue] = field(default_factory=list)


def _find_first(buffer: str, markers: Iterable[str]) -> Tuple[int, Optional[str]]:
    """Earliest complete marker in buffer as (index, marker), or (-1, None)"""
    best_index, best_marker = -1, None
    for marker in markers:
        index = buffer.find(marker)
        if index >= 0 and (best_index < 0 or index < best_index):
            best_index, best_marker = index, marker
    return best_index, best_marker


def _read_line(buffer: str, start: int) -> Optional[Tuple[str, int]]:
    """
    Rest of the line from start as (value, end_index_after_terminator).
    None while no line terminator has arrived yet.
    """
    ends = [i for i in (buffer.find('\n', start), buffer.find('\r', start)) if i >= 0]
    if not ends:
        return None
    end = min(ends)
    after = end + 2 if buffer.startswith('\r\n', end) else end + 1
    return buffer[start:end], after


def _keep_tail(buffer: str) -> str:
    """Drop text that can no longer be part of a marker"""
    return buffer[-_MARKER_TAIL:] if len(buffer) > _MARKER_TAIL else buffer


def _reset_file(snap: ParserSnapshot) -> None:
    snap.state = ParserState.IDLE
    snap.path = None
    snap.language = None
    snap.scan_from = 0
    snap.oversize_reported = False


def _report_stray(text: str, issues: List[ParseIssue]) -> int:
    """Report markers that appear outside any file block, returns end of the last one"""
    end = 0
    while True:
        index, marker = _find_first(text[end:], STRAY_MARKERS)
        if index < 0:
            return end
        issues.append(ParseIssue(
            ParseIssueKind.MALFORMED_MARKER, f"{marker} outside a file block ignored"
        ))
        end += index + len(marker)


def _advance_idle(snap: ParserSnapshot, events: List[ParserEvent], issues: List[ParseIssue]) -> bool:
    index = snap.buffer.find(FILE_MARKER)
    if index < 0:
        end = _report_stray(snap.buffer, issues)
        snap.buffer = _keep_tail(snap.buffer[end:])
        return False

    _report_stray(snap.buffer[:index], issues)
    line = _read_line(snap.buffer, index + len(FILE_MARKER))
    if line is None:
        snap.buffer = snap.buffer[index:]
        return False

    value, end = line
    snap.buffer = snap.buffer[end:]
    path = value.strip()
    if not path:
        issues.append(ParseIssue(ParseIssueKind.MALFORMED_MARKER, "FILE: marker without a path"))
        return True

    snap.path = path
    snap.language = None
    snap.state = ParserState.FILE_OPEN
    events.append(ProgressEvent(path=path))
    return True


def _advance_header(snap: ParserSnapshot, events: List[ParserEvent], issues: List[ParseIssue]) -> bool:
    index, marker = _find_first(snap.buffer, HEADER_MARKERS)
    if index < 0:
        snap.buffer = _keep_tail(snap.buffer)
        return False

    after = index + len(marker)

    if marker == CONTENT_MARKER:
        snap.buffer = snap.buffer[after:].lstrip('\r\n')
        snap.state = ParserState.CONTENT_OPEN
        snap.scan_from = 0
        snap.oversize_reported = False
        return True

    if marker == LANGUAGE_MARKER:
        if snap.state == ParserState.LANGUAGE_OPEN:
            issues.append(ParseIssue(
                ParseIssueKind.MALFORMED_MARKER, "duplicate LANGUAGE: marker ignored", snap.path
            ))
            snap.buffer = snap.buffer[after:]
            return True

        line = _read_line(snap.buffer, after)
        if line is None:
            snap.buffer = snap.buffer[index:]
            return False

        value, end = line
        snap.buffer = snap.buffer[end:]
        snap.language = value.strip() or None
        if snap.language:
            snap.path = ensure_file_extension(snap.path, snap.language)
        snap.state = ParserState.LANGUAGE_OPEN
        return True

    if marker == END_MARKER:
        issues.append(ParseIssue(
            ParseIssueKind.MALFORMED_MARKER, "ENDFILE before CONTENT: ignored", snap.path
        ))
        snap.buffer = snap.buffer[after:]
        return True

    # FILE: again before any content, the header-only file is abandoned
    issues.append(ParseIssue(
        ParseIssueKind.MALFORMED_MARKER, "FILE: marker before CONTENT:, header dropped", snap.path
    ))
    snap.buffer = snap.buffer[index:]
    _reset_file(snap)
    return True


def _advance_content(snap: ParserSnapshot, events: List[ParserEvent], issues: List[ParseIssue],
                     soft_limit: int) -> bool:
    index = snap.buffer.find(END_MARKER, snap.scan_from)
    if index < 0:
        snap.scan_from = max(0, len(snap.buffer) - (len(END_MARKER) - 1))
        if len(snap.buffer) > soft_limit and not snap.oversize_reported:
            snap.oversize_reported = True
            issues.append(ParseIssue(
                ParseIssueKind.OVERSIZED_CONTENT,
                f"pending content exceeds {soft_limit} characters",
                snap.path,
            ))
        return False

    content = snap.buffer[:index].strip()
    path = ensure_file_extension(snap.path, snap.language)
    rest = snap.buffer[index + len(END_MARKER):]
    if rest.startswith('\r\n'):
        rest = rest[2:]
    elif rest[:1] in ('\n', '\r'):
        rest = rest[1:]

    events.append(FileCompleteEvent(file=CodeFile(path=path, content=content, language=snap.language)))
    snap.file_count += 1
    snap.buffer = rest
    _reset_file(snap)
    return True


def step(snapshot: ParserSnapshot, fragment: str, soft_limit: Optional[int] = None) -> StepResult:
    """
    Consume one fragment.

    Markers are matched against the accumulated buffer, so a marker split
    across fragments is recognized once its last character arrives.

    Args:
        snapshot: State after the previous fragment (not modified)
        fragment: Next piece of streamed text
        soft_limit: Pending-content size that triggers OVERSIZED_CONTENT

    Returns:
        StepResult with the new snapshot, emitted events and diagnostics
    """
    if soft_limit is None:
        soft_limit = settings.STREAM_CONTENT_SOFT_LIMIT

    snap = replace(snapshot, buffer=snapshot.buffer + fragment)
    events: List[ParserEvent] = []
    issues: List[ParseIssue] = []

    progressed = True
    while progressed:
        if snap.state == ParserState.IDLE:
            progressed = _advance_idle(snap, events, issues)
        elif snap.state == ParserState.CONTENT_OPEN:
            progressed = _advance_content(snap, events, issues, soft_limit)
        else:
            progressed = _advance_header(snap, events, issues)

    return StepResult(snapshot=snap, events=events, issues=issues)


def finish(snapshot: ParserSnapshot) -> StepResult:
    """
    End of stream: flush an unterminated file that has content, then Done.

    A file still in its header (no CONTENT: yet) is dropped, not flushed.
    """
    snap = replace(snapshot)
    events: List[ParserEvent] = []
    issues: List[ParseIssue] = []

    if snap.state == ParserState.CONTENT_OPEN:
        content = snap.buffer.strip()
        if content:
            path = ensure_file_extension(snap.path, snap.language)
            events.append(FileCompleteEvent(file=CodeFile(path=path, content=content, language=snap.language)))
            snap.file_count += 1
            issues.append(ParseIssue(
                ParseIssueKind.UNTERMINATED_FILE, "stream ended before ENDFILE, partial content flushed", path
            ))
        else:
            issues.append(ParseIssue(
                ParseIssueKind.UNTERMINATED_FILE, "stream ended before ENDFILE, no content to flush", snap.path
            ))
    elif snap.state in (ParserState.FILE_OPEN, ParserState.LANGUAGE_OPEN):
        issues.append(ParseIssue(
            ParseIssueKind.UNTERMINATED_FILE, "stream ended before CONTENT:, file dropped", snap.path
        ))
    elif FILE_MARKER in snap.buffer:
        issues.append(ParseIssue(
            ParseIssueKind.UNTERMINATED_FILE, "stream ended inside a FILE: line, file dropped"
        ))

    snap.buffer = ""
    _reset_file(snap)
    events.append(DoneEvent(file_count=snap.file_count))
    return StepResult(snapshot=snap, events=events, issues=issues)


class StreamingFileBlockParser:
    """
    Stateful driver around step()/finish() for one generation run.

    Usage:
        parser = StreamingFileBlockParser()
        async for event in parser.parse(client.chat_stream(messages)):
            ...

    Abandoning the iteration before DoneEvent is a clean way to stop.
    """

    def __init__(self, soft_limit: Optional[int] = None):
        self.soft_limit = soft_limit if soft_limit is not None else settings.STREAM_CONTENT_SOFT_LIMIT
        self.snapshot = ParserSnapshot()
        self.issues: List[ParseIssue] = []
        self.closed = False

    @property
    def state(self) -> ParserState:
        return self.snapshot.state

    def feed(self, fragment: str) -> List[ParserEvent]:
        """Consume a fragment and return the events it completed"""
        if self.closed:
            raise RuntimeError("parser already closed")
        if not fragment:
            return []
        return self._apply(step(self.snapshot, fragment, self.soft_limit))

    def close(self) -> List[ParserEvent]:
        """Signal end of stream; returns the flush (if any) and DoneEvent"""
        if self.closed:
            return []
        self.closed = True
        return self._apply(finish(self.snapshot))

    def _apply(self, result: StepResult) -> List[ParserEvent]:
        self.snapshot = result.snapshot
        for issue in result.issues:
            self.issues.append(issue)
            logger.log_parse_issue(issue)
        for event in result.events:
            if isinstance(event, ProgressEvent):
                logger.debug(f"[StreamParser] Generating file: {event.path}")
            elif isinstance(event, FileCompleteEvent):
                logger.debug(
                    f"[StreamParser] File {self.snapshot.file_count}: {event.file.path} "
                    f"({len(event.file.content)} chars)"
                )
        return result.events

    def iter_events(self, fragments: Iterable[str]) -> Iterator[ParserEvent]:
        """Parse a synchronous fragment source"""
        for fragment in fragments:
            yield from self.feed(fragment)
        yield from self.close()

    async def parse(self, fragments: AsyncIterable[str]) -> AsyncGenerator[ParserEvent, None]:
        """Parse an asynchronous fragment source (e.g. a live LLM stream)"""
        async for fragment in fragments:
            for event in self.feed(fragment):
                yield event
        for event in self.close():
            yield event


def parse_text(text: str) -> List[CodeFile]:
    """Parse a complete transcript and return its files in stream order"""
    parser = StreamingFileBlockParser()
    return [e.file for e in parser.iter_events([text]) if isinstance(e, FileCompleteEvent)]

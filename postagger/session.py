"""Long-lived tagger subprocess sessions, one per language."""

import codecs
import enum
import logging
import subprocess
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from .config import TaggerConfig
from .errors import (
    ConfigurationError,
    ProcessSpawnError,
    ProcessTerminatedError,
    SessionBusyError,
    SessionNotReadyError,
    TaggerProtocolError,
    TaggerTimeoutError,
)
from .parser import is_delimiter, parse_units

logger = logging.getLogger(__name__)

_READ_SIZE = 4096
_STOP_TIMEOUT = 1.0


class SessionState(enum.Enum):
    ABSENT = "absent"
    STARTING = "starting"
    READY = "ready"


class WaitOutcome(enum.Enum):
    COMPLETE = "complete"
    CLOSED = "closed"
    TIMEOUT = "timeout"


class OutputCollector:
    """Buffers tagger output chunks until a delimiter record is seen.

    Chunks may end in the middle of a unit; only whitespace-terminated
    units are consumed. Every request calls begin() before writing, and
    each delimiter answers the oldest outstanding request, so output of
    a request abandoned after a timeout is discarded when it finally
    arrives instead of being handed to the next one.
    """

    def __init__(self, delimiter: str):
        self.delimiter = delimiter
        self._cond = threading.Condition()
        self._partial = ""
        self._units: list[str] = []
        self._awaiting = 0
        self._complete = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def begin(self) -> None:
        """Reset buffered output and expect one more delimiter."""
        with self._cond:
            self._units = []
            self._complete = False
            self._awaiting += 1

    def feed(self, chunk: str) -> None:
        """Append a chunk of process output."""
        if not chunk:
            return
        with self._cond:
            data = self._partial + chunk
            units = data.split()
            if units and not data[-1].isspace():
                self._partial = units.pop()
            else:
                self._partial = ""
            self._consume(units)

    def _consume(self, units: list[str]) -> None:
        for unit in units:
            if not is_delimiter(unit, self.delimiter):
                self._units.append(unit)
                continue
            if self._awaiting > 1:
                logger.debug("Discarding %d stale output units", len(self._units))
                self._awaiting -= 1
                self._units = []
                continue
            self._awaiting = 0
            self._complete = True
            self._cond.notify_all()

    def wait(self, timeout: float) -> WaitOutcome:
        """Block until the response is complete, the stream closes, or timeout."""
        with self._cond:
            self._cond.wait_for(lambda: self._complete or self._closed, timeout)
            if self._complete:
                return WaitOutcome.COMPLETE
            if self._closed:
                return WaitOutcome.CLOSED
            return WaitOutcome.TIMEOUT

    def take(self) -> list[str]:
        """Return and clear the units collected for the current request."""
        with self._cond:
            units = self._units
            self._units = []
            self._complete = False
            return units

    def drain(self) -> None:
        """Forget all buffered output and outstanding requests."""
        with self._cond:
            self._partial = ""
            self._units = []
            self._awaiting = 0
            self._complete = False

    def close(self) -> None:
        """Mark end of stream and wake waiters."""
        with self._cond:
            if self._partial:
                self._consume([self._partial])
                self._partial = ""
            self._closed = True
            self._cond.notify_all()


class TaggerSession:
    """A running tagger process for one language.

    submit() is synchronous for callers. A reader thread feeds the
    process output into an OutputCollector that submit() waits on.
    """

    def __init__(self, language: str, profile_path: str | Path, config: TaggerConfig):
        self.language = language
        self.profile_path = Path(profile_path)
        self.config = config
        self.state = SessionState.ABSENT
        self._process: Optional[subprocess.Popen] = None
        self._reader: Optional[threading.Thread] = None
        self._collector = OutputCollector(config.delimiter)
        self._submit_lock = threading.Lock()
        # Requests in a row that ended without their delimiter
        self.consecutive_timeouts = 0

    @property
    def pid(self) -> Optional[int]:
        process = self._process
        return process.pid if process is not None else None

    def command(self) -> list[str]:
        """Build the tagger command line."""
        cmd = [str(self.config.executable), *self.config.arguments]
        if self.config.profile_flag:
            cmd.append(self.config.profile_flag)
        cmd.append(str(self.profile_path))
        return cmd

    def is_alive(self) -> bool:
        process = self._process
        return process is not None and process.poll() is None

    def start(self) -> None:
        """Spawn the tagger and wait for it to settle.

        Raises:
            ProcessSpawnError: If the process cannot be launched or exits
                during the settling delay
        """
        if self.state is SessionState.READY and self.is_alive():
            return

        if self._process is not None:
            self.close()

        self.state = SessionState.STARTING
        cmd = self.command()
        logger.info("Starting tagger for %s: %s", self.language, " ".join(cmd))
        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            self.state = SessionState.ABSENT
            raise ProcessSpawnError(
                f"Failed to launch tagger {cmd[0]}: {e}", self.language
            ) from e

        self._process = process
        self.consecutive_timeouts = 0
        self._collector = OutputCollector(self.config.delimiter)
        self._reader = threading.Thread(
            target=self._read_loop,
            args=(process, self._collector),
            name=f"tagger-reader-{self.language}",
            daemon=True,
        )
        self._reader.start()

        if self.config.startup_delay:
            time.sleep(self.config.startup_delay)
        if process.poll() is not None:
            code = process.returncode
            self.close()
            raise ProcessSpawnError(
                f"Tagger for {self.language} exited during startup with code {code}",
                self.language,
            )

        self.state = SessionState.READY
        logger.info("Tagger for %s ready: pid=%s", self.language, process.pid)

    def _read_loop(self, process: subprocess.Popen, collector: OutputCollector) -> None:
        decoder = codecs.getincrementaldecoder(self.config.encoding)(errors="replace")
        try:
            while True:
                data = process.stdout.read1(_READ_SIZE)
                if not data:
                    break
                collector.feed(decoder.decode(data))
        except (OSError, ValueError) as e:
            logger.debug("Tagger output for %s closed: %s", self.language, e)
        finally:
            collector.feed(decoder.decode(b"", final=True))
            collector.close()

    def submit(self, tokenized_text: str) -> list[tuple[str, str]]:
        """
        Send one tokenized sentence and collect the tagged pairs.

        Args:
            tokenized_text: Whitespace-separated tokens

        Returns:
            Ordered list of (surface, tag) pairs

        Raises:
            SessionNotReadyError: If the session was not started
            SessionBusyError: If busy_policy is "fail" and a request is in flight
            TaggerTimeoutError: If no output arrived in time
            TaggerProtocolError: If output arrived without the delimiter,
                or a token would be read as the delimiter
            MalformedOutputError: If a unit has no separator
            ProcessTerminatedError: If the process exited during the request
        """
        if self.state is not SessionState.READY:
            raise SessionNotReadyError(
                f"Tagger session for {self.language} is not ready", self.language
            )

        blocking = self.config.busy_policy == "queue"
        if not self._submit_lock.acquire(blocking=blocking):
            raise SessionBusyError(
                f"Tagger session for {self.language} is busy", self.language
            )
        try:
            return self._exchange(tokenized_text)
        finally:
            self._submit_lock.release()

    def _exchange(self, tokenized_text: str) -> list[tuple[str, str]]:
        process = self._process
        collector = self._collector
        if process is None or process.poll() is not None:
            self.state = SessionState.ABSENT
            raise ProcessTerminatedError(
                f"Tagger for {self.language} is not running", self.language
            )

        tokens = tokenized_text.split()
        delimiter = self.config.delimiter
        reserved = [token for token in tokens if is_delimiter(token, delimiter)]
        if reserved:
            logger.warning(
                "Refusing request to %s tagger: token %r collides with the delimiter",
                self.language,
                reserved[0],
            )
            raise TaggerProtocolError(
                f"Token {reserved[0]!r} would be read as the delimiter {delimiter!r}",
                self.language,
            )
        line = " ".join(tokens)
        payload = f"{line}\n{delimiter}\n".encode(self.config.encoding, errors="replace")

        collector.begin()
        logger.debug("Request to %s tagger: %s", self.language, line)
        try:
            process.stdin.write(payload)
            process.stdin.flush()
        except (OSError, ValueError) as e:
            self.state = SessionState.ABSENT
            raise ProcessTerminatedError(
                f"Tagger for {self.language} stopped accepting input: {e}", self.language
            ) from e

        outcome = collector.wait(self.config.timeout)
        if outcome is WaitOutcome.COMPLETE:
            self.consecutive_timeouts = 0
            return parse_units(collector.take(), delimiter)

        if outcome is WaitOutcome.CLOSED:
            self.state = SessionState.ABSENT
            raise ProcessTerminatedError(
                f"Tagger for {self.language} exited during a request", self.language
            )

        self.consecutive_timeouts += 1
        received = collector.take()
        if received:
            logger.warning(
                "Tagger for %s returned %d units without the delimiter",
                self.language,
                len(received),
            )
            raise TaggerProtocolError(
                f"Tagger for {self.language} returned {len(received)} units "
                f"without the delimiter {delimiter!r}",
                self.language,
            )
        logger.warning(
            "No response from tagger for %s within %ss", self.language, self.config.timeout
        )
        raise TaggerTimeoutError(
            f"No response from tagger for {self.language} within {self.config.timeout}s",
            self.language,
        )

    def close(self) -> None:
        """Stop the process. Safe to call more than once."""
        process = self._process
        self._process = None
        self.state = SessionState.ABSENT
        if process is None:
            return

        try:
            process.stdin.close()
        except OSError:
            logger.debug("Tagger stdin for %s already closed", self.language)
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=_STOP_TIMEOUT)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
        if self._reader is not None and self._reader is not threading.current_thread():
            self._reader.join(timeout=_STOP_TIMEOUT)
        self._collector.close()
        logger.info("Stopped tagger for %s: pid=%s", self.language, process.pid)


SessionFactory = Callable[[str, Path, TaggerConfig], TaggerSession]


class SessionManager:
    """Owns one TaggerSession per language key.

    Sessions start lazily on ensure_ready() and live until shutdown().
    Starts are serialized per key only, so different languages never
    wait on each other.
    """

    def __init__(self, config: TaggerConfig, session_factory: SessionFactory = TaggerSession):
        self.config = config
        self._session_factory = session_factory
        self._sessions: dict[str, TaggerSession] = {}
        self._start_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def __enter__(self) -> "SessionManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown_all()

    def _get(self, language: str) -> Optional[TaggerSession]:
        with self._lock:
            return self._sessions.get(language)

    def _start_lock(self, language: str) -> threading.Lock:
        with self._lock:
            return self._start_locks.setdefault(language, threading.Lock())

    def _discard(self, language: str, session: TaggerSession) -> None:
        with self._lock:
            if self._sessions.get(language) is session:
                del self._sessions[language]
        session.close()

    @staticmethod
    def _usable(session: Optional[TaggerSession]) -> bool:
        return (
            session is not None
            and session.state is SessionState.READY
            and session.is_alive()
        )

    def state(self, language: str) -> SessionState:
        session = self._get(language)
        return session.state if session is not None else SessionState.ABSENT

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def ensure_ready(
        self, language: str, profile_path: Optional[str | Path]
    ) -> TaggerSession:
        """
        Return a READY session for a language, starting it if needed.

        Args:
            language: Language key
            profile_path: Tagger profile for the language

        Raises:
            ConfigurationError: If no profile is given or it does not exist
            ProcessSpawnError: If the tagger cannot be started
        """
        if profile_path is None:
            raise ConfigurationError(
                f"No tagger profile configured for language {language!r}", language
            )

        session = self._get(language)
        if self._usable(session):
            return session

        with self._start_lock(language):
            session = self._get(language)
            if self._usable(session):
                return session
            if session is not None:
                logger.warning("Tagger for %s is no longer running, restarting", language)
                self._discard(language, session)

            path = Path(profile_path)
            if not path.exists():
                raise ConfigurationError(
                    f"Tagger profile for language {language!r} not found: {path}", language
                )

            session = self._session_factory(language, path, self.config)
            with self._lock:
                self._sessions[language] = session
            try:
                session.start()
            except Exception:
                self._discard(language, session)
                raise
            return session

    def submit(self, language: str, tokenized_text: str) -> list[tuple[str, str]]:
        """Send tokenized text to the language's READY session.

        A session whose last max_timeouts requests all went unanswered is
        stopped; the next ensure_ready() starts a fresh process.
        """
        session = self._get(language)
        if session is None or session.state is not SessionState.READY:
            raise SessionNotReadyError(
                f"No ready tagger session for language {language!r}", language
            )
        try:
            return session.submit(tokenized_text)
        except ProcessTerminatedError:
            self._discard(language, session)
            raise
        except (TaggerTimeoutError, TaggerProtocolError):
            if session.consecutive_timeouts >= self.config.max_timeouts:
                logger.warning(
                    "Tagger for %s timed out %d times in a row, stopping it",
                    language,
                    session.consecutive_timeouts,
                )
                self._discard(language, session)
            raise

    def shutdown(self, language: str) -> None:
        """Stop the session for a language; no-op if there is none."""
        with self._lock:
            session = self._sessions.pop(language, None)
        if session is not None:
            session.close()

    def shutdown_all(self) -> None:
        for language in self.keys():
            self.shutdown(language)

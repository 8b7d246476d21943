"""First-success backend selection."""

import logging
import time
from pathlib import Path
from typing import Iterable, Optional, Sequence

from officereader.backends.descriptor import BackendDescriptor
from officereader.backends.registry import get_backends
from officereader.errors import AllBackendsFailedError
from officereader.models import DocumentKind, ExtractionResult

logger = logging.getLogger(__name__)


class BackendSelector:
    """Try backends in priority order and keep the first success.

    A backend fails only by raising; slow backends are never skipped, and
    an empty string is a valid (empty) document. There are no retries.
    """

    def __init__(
        self,
        catalogue: Optional[Sequence[BackendDescriptor]] = None,
        disabled: Iterable[str] = (),
    ):
        """Initialize the selector.

        Args:
            catalogue: Fixed set of descriptors; defaults to the registry
            disabled: Backend names never to try
        """
        self._catalogue = tuple(catalogue) if catalogue is not None else None
        self._disabled = frozenset(disabled)

    def candidates(self, kind: DocumentKind) -> list[BackendDescriptor]:
        """Available, enabled backends for ``kind``, fastest first."""
        return [
            d
            for d in get_backends(kind, self._catalogue)
            if d.available and d.name not in self._disabled
        ]

    def select_and_extract(self, path: Path | str, kind: DocumentKind) -> ExtractionResult:
        """Extract ``path`` with the first backend that succeeds.

        Raises:
            AllBackendsFailedError: with every backend's failure reason
        """
        path = Path(path)
        order = self.candidates(kind)
        logger.debug(
            f"extract start {path.name} kind={kind.value} "
            f"order={[d.name for d in order]}"
        )

        start_total = time.perf_counter()
        attempts: list[str] = []
        failures: list[tuple[str, str]] = []
        for descriptor in order:
            attempts.append(descriptor.name)
            t0 = time.perf_counter()
            try:
                text = descriptor.extract(path)
            except Exception as e:
                reason = f"{type(e).__name__}: {e}"
                failures.append((descriptor.name, reason))
                logger.warning(f"Backend {descriptor.name} failed for {path.name}: {reason}")
                continue

            elapsed_ms = (time.perf_counter() - start_total) * 1000.0
            logger.debug(
                f"backend {descriptor.name} produced {len(text)} chars "
                f"in {(time.perf_counter() - t0) * 1000.0:.1f} ms"
            )
            if failures:
                logger.info(
                    f"Used fallback backend {descriptor.name} for {path.name} "
                    f"after {[name for name, _ in failures]}"
                )
            return ExtractionResult(
                text=text,
                backend=descriptor.name,
                attempts=attempts,
                elapsed_ms=elapsed_ms,
            )

        logger.error(f"All backends failed for {path} (attempts={attempts})")
        raise AllBackendsFailedError(str(path), failures)

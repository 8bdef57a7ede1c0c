"""Backend load orchestration.

The connector makes sure (language, namespace) bundles are present in the
store. It consults the cache, then the backend, retries failed fetches with
exponential backoff, and never runs two fetches for the same pair at once:
overlapping requests wait on the same in-flight task.

Each caller waits only for the pairs it asked for and receives one
aggregate ``LoadError`` (or None). A failing pair never stops its siblings.
"""

import asyncio
import inspect
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from i18n_core.configuration import I18nSettings, LoadRetrySettings
from i18n_core.events import DiagnosticsChannel, EventType
from i18n_core.i18n.backends import Backend, Cache
from i18n_core.i18n.errors import FetchError, LoadError
from i18n_core.i18n.models import LoadRecord, LoadState
from i18n_core.i18n.store import ResourceStore
from i18n_core.logging import get_module_logger

logger = get_module_logger()

Pair = Tuple[str, str]
LoadCallback = Callable[[Optional[LoadError]], Any]


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(v for v in values if v))


async def _call(fn: Callable[..., Any], *args: Any) -> Any:
    """Await coroutine functions, run plain callables in a worker thread."""
    if inspect.iscoroutinefunction(fn):
        return await fn(*args)
    result = await asyncio.to_thread(fn, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


class BackendConnector:
    """Loads bundles from a backend into the store.

    Attributes:
        backend: Bundle source, or None when resources are pre-populated.
        cache: Optional cache consulted before the backend.
        store: Store receiving the bundles.
        retry: Retry policy for backend reads.
        state: LoadRecord per (language, namespace) pair.
    """

    def __init__(
        self,
        backend: Optional[Backend],
        store: ResourceStore,
        settings: Optional[I18nSettings] = None,
        cache: Optional[Cache] = None,
        diagnostics: Optional[DiagnosticsChannel] = None,
    ):
        settings = settings or I18nSettings()
        self.backend = backend
        self.cache = cache
        self.store = store
        self.retry: LoadRetrySettings = settings.retry
        self.diagnostics = diagnostics
        self.state: Dict[Pair, LoadRecord] = {}
        self._inflight: Dict[Pair, "asyncio.Task[None]"] = {}
        self._background: Set["asyncio.Future[Any]"] = set()

    def _emit(self, event_type: EventType, **payload: Any) -> None:
        if self.diagnostics:
            self.diagnostics.emit(event_type, **payload)

    def record_of(self, lng: str, ns: str) -> LoadRecord:
        return self.state.setdefault((lng, ns), LoadRecord(language=lng, namespace=ns))

    def state_of(self, lng: str, ns: str) -> LoadState:
        record = self.state.get((lng, ns))
        return record.state if record else LoadState.UNREQUESTED

    async def ensure_loaded(
        self,
        languages: Iterable[str],
        namespaces: Iterable[str],
        callback: Optional[LoadCallback] = None,
    ) -> Optional[LoadError]:
        """Make sure every (language, namespace) pair is loaded or failed.

        Args:
            languages: Language tags to load.
            namespaces: Namespaces to load for every language.
            callback: Optional callable receiving the aggregate error.

        Returns:
            LoadError listing this caller's failed pairs, or None.
        """
        return await self._load(languages, namespaces, callback, force=False)

    async def reload(
        self,
        languages: Iterable[str],
        namespaces: Iterable[str],
        callback: Optional[LoadCallback] = None,
    ) -> Optional[LoadError]:
        """Refetch pairs even when loaded; fetched bundles replace stored ones."""
        return await self._load(languages, namespaces, callback, force=True)

    async def _load(
        self,
        languages: Iterable[str],
        namespaces: Iterable[str],
        callback: Optional[LoadCallback],
        force: bool,
    ) -> Optional[LoadError]:
        languages = _unique(languages)
        namespaces = _unique(namespaces)

        if self.backend is None:
            logger.debug("no_backend_configured", languages=languages, namespaces=namespaces)
            if callback:
                callback(None)
            return None

        waits: Dict[Pair, "asyncio.Task[None]"] = {}
        for lng in languages:
            for ns in namespaces:
                pair = (lng, ns)
                task = self._inflight.get(pair)
                if task is None:
                    if not force and self._already_loaded(pair):
                        continue
                    record = self.record_of(lng, ns)
                    record.state = LoadState.PENDING
                    record.attempts = 0
                    record.last_error = None
                    task = asyncio.ensure_future(self._load_pair(lng, ns, replace=force))
                    self._inflight[pair] = task
                waits[pair] = task

        if waits:
            # asyncio.wait never cancels the shared tasks if this caller is cancelled
            await asyncio.wait(list(waits.values()))

        failures = {
            pair: self.state[pair].last_error or "unknown error"
            for pair in waits
            if self.state[pair].state == LoadState.FAILED
        }
        error = LoadError(failures) if failures else None
        if error:
            logger.warning("load_batch_incomplete", failed=len(failures), requested=len(waits))
        if callback:
            callback(error)
        return error

    def _already_loaded(self, pair: Pair) -> bool:
        record = self.state.get(pair)
        if record and record.state == LoadState.LOADED:
            return True
        if self.store.has_resource_bundle(*pair):
            record = self.record_of(*pair)
            record.state = LoadState.LOADED
            record.source = record.source or "store"
            return True
        return False

    async def _load_pair(self, lng: str, ns: str, replace: bool = False) -> None:
        record = self.record_of(lng, ns)
        try:
            if self.cache is not None and not replace:
                cached = await self._read_cache(lng, ns)
                if cached is not None:
                    self.store.add_resource_bundle(lng, ns, cached, deep=True, overwrite=True)
                    self._mark_loaded(record, "cache")
                    return

            data = await self._read_backend(record)
            if record.state == LoadState.FAILED:
                return

            if replace:
                self.store.replace_resource_bundle(lng, ns, data or {})
            elif data:
                self.store.add_resource_bundle(lng, ns, data, deep=True, overwrite=True)

            if self.cache is not None and data:
                await self._write_cache(lng, ns, data)
            self._mark_loaded(record, "backend")
        except Exception as e:  # pylint: disable=broad-except
            # store or bookkeeping failure, keep sibling pairs unaffected
            self._mark_failed(record, str(e))
        finally:
            self._inflight.pop((lng, ns), None)

    async def _read_backend(self, record: LoadRecord) -> Optional[Dict[str, Any]]:
        lng, ns = record.language, record.namespace
        while True:
            record.attempts += 1
            try:
                return await _call(self.backend.read, lng, ns)
            except Exception as e:  # pylint: disable=broad-except
                record.last_error = str(e)
                retryable = not isinstance(e, FetchError) or e.retryable
                retries_used = record.attempts - 1
                if not retryable or retries_used >= self.retry.max_retries:
                    self._mark_failed(record, str(e))
                    return None

                delay = self.retry.delay_for(record.attempts)
                logger.warning(
                    "retrying_bundle_load",
                    lng=lng,
                    ns=ns,
                    attempt=record.attempts,
                    delay_seconds=delay,
                    error=str(e),
                )
                await asyncio.sleep(delay)

    async def _read_cache(self, lng: str, ns: str) -> Optional[Dict[str, Any]]:
        try:
            return await _call(self.cache.read, lng, ns)
        except Exception as e:  # pylint: disable=broad-except
            logger.warning("cache_read_failed", lng=lng, ns=ns, error=str(e))
            return None

    async def _write_cache(self, lng: str, ns: str, data: Dict[str, Any]) -> None:
        try:
            await _call(self.cache.write, lng, ns, data)
        except Exception as e:  # pylint: disable=broad-except
            logger.warning("cache_write_failed", lng=lng, ns=ns, error=str(e))

    def _mark_loaded(self, record: LoadRecord, source: str) -> None:
        record.state = LoadState.LOADED
        record.source = source
        logger.info(
            "loaded_bundle",
            lng=record.language,
            ns=record.namespace,
            source=source,
            attempts=record.attempts,
        )
        self._emit(
            EventType.LOADED,
            lng=record.language,
            ns=record.namespace,
            source=source,
        )

    def _mark_failed(self, record: LoadRecord, error: str) -> None:
        record.state = LoadState.FAILED
        record.last_error = error
        logger.error(
            "failed_loading_bundle",
            lng=record.language,
            ns=record.namespace,
            attempts=record.attempts,
            error=error,
        )
        self._emit(
            EventType.FAILED_LOADING,
            lng=record.language,
            ns=record.namespace,
            attempts=record.attempts,
            error=error,
        )

    def save_missing(
        self, languages: List[str], namespace: str, key: str, fallback_value: Any
    ) -> None:
        """Forward a missing key to the backend.

        Coroutine results are scheduled on the running loop; without a
        running loop they are dropped with a warning.
        """
        if self.backend is None:
            return
        result = self.backend.create(languages, namespace, key, fallback_value)
        if not inspect.isawaitable(result):
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("save_missing_requires_running_loop", ns=namespace, key=key)
            if inspect.iscoroutine(result):
                result.close()
            return
        future = asyncio.ensure_future(result)
        self._background.add(future)
        future.add_done_callback(self._background.discard)

"""
Aggregator - Feature sources to a canonical label set

Runs every enabled feature source under a fault-isolation boundary and
turns the discovered features into namespaced labels:

    labels, errors = build_labels(sources, LabelWhitelist(".*rdt.*"))

Each ``name()`` and ``discover()`` call is submitted to a thread pool as its
own future. Whatever the call raises (DetectorError, any other exception,
even SystemExit) ends up stored in that future and is converted into a
DetectorError here, so one broken source never aborts the cycle or touches
another source's labels.
"""

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .exceptions import DetectorError, DetectorFaultError
from .labels import LABEL_VALUE, LabelWhitelist, Labels, make_label_key
from .logger import logger
from .sources.base import FeatureSource


def _collect_features(source: FeatureSource) -> Set[str]:
    # Consume the iterable on the worker so lazy sources fail inside the boundary
    return {str(feature) for feature in source.discover()}


def _as_detector_error(name: str, exc: BaseException) -> DetectorError:
    """Convert whatever a source raised into a DetectorError."""
    if isinstance(exc, DetectorError):
        if exc.source is None:
            exc.source = name
        return exc

    message = str(exc) or type(exc).__name__
    fault = DetectorFaultError(message, source=name)
    fault.__cause__ = exc
    return fault


def _supervised_result(name: str, future: Future) -> Set[str]:
    """
    Result of a supervised discover() call.

    Raises:
        DetectorError: the source failed; DetectorFaultError if it faulted
    """
    exc = future.exception()
    if exc is not None:
        raise _as_detector_error(name, exc)
    return future.result()


def _labels_for(name: str, features: Iterable[str]) -> Labels:
    return {make_label_key(name, feature): LABEL_VALUE for feature in features}


def _supervised_name(source: FeatureSource, future: Future) -> str:
    """
    Result of a supervised name() call.

    Raises:
        DetectorError: name() raised; the error is keyed by the source's class name
    """
    exc = future.exception()
    if exc is not None:
        raise _as_detector_error(type(source).__name__, exc)
    return str(future.result())


def _record_error(name: str, error: DetectorError, errors: Dict[str, DetectorError]) -> None:
    if isinstance(error, DetectorFaultError):
        logger.error(f"❌ Feature source '{name}' faulted: {error}", exc_info=error.__cause__)
    else:
        logger.warning(f"⚠️  Failed to discover features from source '{name}': {error}")
    errors[name] = error


def get_feature_labels(source: FeatureSource) -> Labels:
    """
    Discover the features of a single source and build its labels (unfiltered).

    Raises:
        DetectorError: the source failed or faulted
    """
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="nfd-source") as executor:
        name = _supervised_name(source, executor.submit(source.name))
        future = executor.submit(_collect_features, source)
        features = _supervised_result(name, future)
    return _labels_for(name, features)


def build_labels(
    sources: Sequence[FeatureSource],
    whitelist: Optional[LabelWhitelist] = None,
    max_workers: Optional[int] = None,
) -> Tuple[Labels, Dict[str, DetectorError]]:
    """
    Build the label set of one discovery cycle.

    Args:
        sources: Enabled feature sources
        whitelist: Label key filter (default: accept everything)
        max_workers: Thread pool size (default: one thread per source)

    Returns:
        (labels, errors) where errors maps source name to the error that
        kept the source out of this cycle's labels. A source whose name()
        raised is keyed by its class name.
    """
    whitelist = whitelist or LabelWhitelist()
    labels: Labels = {}
    errors: Dict[str, DetectorError] = {}
    if not sources:
        return labels, errors

    named: List[Tuple[FeatureSource, str]] = []
    per_source: Dict[str, Labels] = {}
    workers = min(max_workers or len(sources), len(sources))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="nfd-source") as executor:
        # name() is source code too, so it runs in the pool like discover()
        name_futures = [(source, executor.submit(source.name)) for source in sources]
        for source, future in name_futures:
            try:
                named.append((source, _supervised_name(source, future)))
            except DetectorError as e:
                _record_error(type(source).__name__, e, errors)

        future_to_name = {
            executor.submit(_collect_features, source): name
            for source, name in named
        }

        for future in as_completed(future_to_name):
            name = future_to_name[future]
            try:
                features = _supervised_result(name, future)
            except DetectorError as e:
                _record_error(name, e, errors)
                continue

            per_source[name] = _labels_for(name, features)

    # Merge in the order sources were given; keys carry the source name so
    # they cannot collide between sources
    for _, name in named:
        for key, value in sorted(per_source.get(name, {}).items()):
            if not whitelist.matches(key):
                logger.info(f"{key} does not match the whitelist ({whitelist.pattern}) and will not be published.")
                continue
            logger.info(f"Feature label: {key}")
            labels[key] = value

    return labels, errors

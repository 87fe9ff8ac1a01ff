from datetime import timedelta
from pathlib import Path

import requests_cache
import structlog
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = structlog.get_logger('client')


def _log_response(response, *args, **kwargs):
    if getattr(response, '_logged', False):
        return
    response._logged = True

    is_cached = getattr(response, 'from_cache', False)
    log_kwargs = {
        'method': response.request.method,
        'url': response.url,
        'status': response.status_code,
        'elapsed': f"{response.elapsed.total_seconds():.3f}s",
        'cached': is_cached,
    }
    total = response.headers.get('Content-Length')
    if total:
        log_kwargs['content_length'] = total

    if is_cached:
        logger.debug('HTTP Request', _style='dim', **log_kwargs)
    else:
        logger.debug('HTTP Request', **log_kwargs)


def get_http_client(
    cache_name: str = '.requests-cache/sbomgate.sqlite3',
    expire_after: int = 60,
    retries: int = 3,
    pool_size: int = 10,
) -> requests_cache.CachedSession:
    """
    Session used by the CLI to talk to a running gateway.

    Search responses are cached briefly; server errors are retried with
    backoff. Document downloads run under `session.cache_disabled()` so they
    stream straight to disk.
    """
    cache_path = Path(cache_name)
    cache_path.parent.mkdir(parents=True, exist_ok=True)

    session = requests_cache.CachedSession(
        cache_name=cache_name,
        backend='sqlite',
        expire_after=timedelta(seconds=expire_after),
        allowable_codes=[200],
        allowable_methods=['GET'],
    )
    session.hooks['response'].append(_log_response)

    retry_strategy = Retry(
        total=retries,
        backoff_factor=1,
        status_forcelist=[502, 503, 504],
        allowed_methods=['GET'],
    )
    adapter = HTTPAdapter(
        pool_connections=pool_size,
        pool_maxsize=pool_size,
        max_retries=retry_strategy,
    )
    session.mount('https://', adapter)
    session.mount('http://', adapter)

    logger.debug(
        'Initialized Cached HTTP Client',
        cache_name=cache_name,
        expire_after=expire_after,
    )
    return session

# src/pricealert/main.py
import sys
import asyncio
import structlog
from dotenv import load_dotenv

from pricealert.config import Settings, load_targets
from pricealert.runner import AlertRun, RunResult
from pricealert.ingest.price_source import SpotPriceSource
from pricealert.alerts.notifiers import GithubOutputs
from pricealert.storage.json_state import JsonStateStore
from pricealert.storage.redis_state import RedisStateStore

log = structlog.get_logger()


def configure_logging() -> None:
    # stdout carries the alert body; diagnostics go to stderr
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(file=sys.stderr))


async def main(settings: Settings | None = None) -> RunResult:
    settings = settings or Settings.from_env()

    # config errors abort before any network call or state access
    targets = load_targets(settings.config_path)

    if settings.state_redis_url:
        store = RedisStateStore.from_url(settings.state_redis_url, key=settings.state_redis_key)
    else:
        store = JsonStateStore(settings.state_path)

    run = AlertRun(
        targets=targets,
        store=store,
        source=SpotPriceSource(settings.price),
        outputs=GithubOutputs(settings.github_output),
        product=settings.price.product,
        run_url=settings.run_url,
    )
    try:
        return await run.run()
    finally:
        if isinstance(store, RedisStateStore):
            await store.close()


def run_cli() -> int:
    load_dotenv()
    configure_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.warning("interrupted")
        return 130
    except Exception as e:
        log.exception("run_failed", err=str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(run_cli())

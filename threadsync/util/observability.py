"""Observability configuration using Logfire.

Every store mutation and use case opens a logfire span, so a trace shows
which push event or page fetch changed the forest. Usage:

    import logfire

    logfire.info("Replies loaded", comment_id=comment_id, appended=3)

    with logfire.span("load_more_replies", comment_id=comment_id):
        ...
"""

import logfire

from threadsync.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    - Development: local-only (unless token provided), rich console output
    - Production: cloud sending if a token is provided, minimal console
    - Test: no console output, nothing sent

    Args:
        settings: Application settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    elif settings.observability.logfire_token:
        send_to_logfire = True
    else:
        send_to_logfire = False

    config_kwargs = {
        "service_name": "threadsync",
        "service_version": "1.0.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": (
            False
            if settings.environment == "test"
            else logfire.ConsoleOptions(
                colors="auto",
                span_style="show-parents",
                include_timestamps=True,
                verbose=settings.debug,
            )
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_httpx() -> None:
    """Instrument httpx with Logfire.

    Traces GraphQL requests and the event stream connection.
    """
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")

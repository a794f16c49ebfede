"""Command processing - drives a command through event derivation, storage and replies"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol

from lunch_ledger.domain.events import derive_events
from lunch_ledger.domain.exceptions import DeliveryError
from lunch_ledger.domain.models import AggregateSnapshot, Command, Event, Reply
from lunch_ledger.domain.replies import ReplyComposer
from lunch_ledger.config import settings
from lunch_ledger.infrastructure.observability.logging import log_command_processed, setup_logging
from lunch_ledger.infrastructure.observability.metrics import (
    command_duration_histogram,
    record_command,
    record_events,
    replies_composed_counter,
)
from lunch_ledger.schemas import parse_command


class EventStore(Protocol):
    """Append-only event storage; append is ordered and atomic per call"""

    def append(self, events: List[Event]) -> None: ...


class Aggregator(Protocol):
    """Publishes the aggregate state folded from every appended event"""

    def snapshot(self) -> AggregateSnapshot: ...


class ReplyDelivery(Protocol):
    """Sends replies to their channels"""

    def deliver(self, replies: List[Reply]) -> None: ...


@dataclass(frozen=True)
class ProcessResult:
    events: List[Event]
    replies: List[Reply]


class CommandProcessor:
    """Processes one command end to end against injected store, aggregator and delivery"""

    def __init__(
        self,
        store: EventStore,
        aggregator: Aggregator,
        delivery: ReplyDelivery,
        composer: ReplyComposer | None = None,
    ):
        self.store = store
        self.aggregator = aggregator
        self.delivery = delivery
        self.composer = composer or ReplyComposer()

    def process(self, command: Command) -> ProcessResult:
        """
        Flow:
        1. Read the aggregate snapshot (state before this command)
        2. Derive events from the command
        3. Append events to the store
        4. Re-read the snapshot so queries see the new events
        5. Compose replies
        6. Deliver replies
        """
        start_time = time.time()
        command_type = command.command_type.value

        try:
            with command_duration_histogram.time():
                # 1-2. Derive against the state before this command
                events = derive_events(command, self.aggregator.snapshot())

                # 3-4. Persist and refresh
                if events:
                    self.store.append(events)
                snapshot = self.aggregator.snapshot()

                # 5. Compose replies
                replies = self.composer.compose(command, snapshot, events)

                # 6. Deliver
                if replies:
                    try:
                        self.delivery.deliver(replies)
                    except Exception as e:
                        raise DeliveryError(f"Failed to deliver {len(replies)} replies: {e}") from e

        except Exception as e:
            record_command(command_type, succeeded=False)
            logging.error(
                f"Command failed: {e}",
                extra={"command_type": command_type, "requestor": command.requestor},
            )
            raise

        record_command(command_type, succeeded=True)
        record_events(events)
        replies_composed_counter.labels(command_type=command_type).inc(len(replies))

        duration_ms = (time.time() - start_time) * 1000
        log_command_processed(
            command_type, command.requestor, command.channel_id, len(events), len(replies), duration_ms
        )
        return ProcessResult(events=events, replies=replies)

    def process_payload(self, data: Dict[str, Any]) -> ProcessResult:
        """Validate a raw command payload, then process it"""
        return self.process(parse_command(data))


def create_processor(
    store: EventStore,
    aggregator: Aggregator,
    delivery: ReplyDelivery,
    composer: ReplyComposer | None = None,
) -> CommandProcessor:
    """Create a command processor with structured logging configured"""
    setup_logging(settings.log_level)
    return CommandProcessor(store, aggregator, delivery, composer)

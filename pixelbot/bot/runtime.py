"""Bot runtime orchestrating transport traffic, sessions, devices and handlers."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from pixelbot.bot.context import BotContext
from pixelbot.bot.events import InboundUnit, NotifyUnit, UnknownUnit, classify, rpc_response
from pixelbot.bot.keyboard import InlineKeyboard
from pixelbot.bot.router import DispatchOutcome, EventRouter, Handler
from pixelbot.errors import PixelBotError, UnboundDeviceError
from pixelbot.hardware.adapter.base import ChatTransport
from pixelbot.hardware.bridge import DEFAULT_TIMEOUT_S, RpcBridge
from pixelbot.hardware.device import Device
from pixelbot.hardware.protocol import RpcRequest, RpcResponse
from pixelbot.hardware.registry import DeviceSessionRegistry
from pixelbot.observability import BotRuntimeMetrics
from pixelbot.scheduler.controller import (
    Action,
    ErrorReporter,
    IntervalResolver,
    ScheduledActivityController,
)
from pixelbot.session.manager import Session, SessionManager, SubscriptionRegistry, chat_key

DEVICE_CHAT_ID = "__devices__"


class BotRuntime:
    """Runtime for one bot independent of the hosting platform's transport.

    Inbound units are serialized per session: each chat gets one worker task
    that runs units in arrival order under ``session.lock``. Scheduled
    activity takes the same lock. RPC responses are matched to pending calls
    as soon as they arrive, without waiting for any session.
    """

    def __init__(
        self,
        *,
        transport: ChatTransport,
        router: EventRouter | None = None,
        sessions: SessionManager | None = None,
        registry: DeviceSessionRegistry | None = None,
        subscriptions: SubscriptionRegistry | None = None,
        rpc_timeout_s: float = DEFAULT_TIMEOUT_S,
        metrics: BotRuntimeMetrics | None = None,
    ) -> None:
        self.transport = transport
        self.metrics = metrics or BotRuntimeMetrics()
        self.router = router or EventRouter()
        self.sessions = sessions or SessionManager()
        self.registry = registry or DeviceSessionRegistry()
        self.subscriptions = subscriptions or SubscriptionRegistry()
        self.bridge = RpcBridge(
            transport=transport,
            registry=self.registry,
            timeout_s=rpc_timeout_s,
            metrics=self.metrics,
        )
        self._running = False
        self._event_task: asyncio.Task | None = None
        self._queues: dict[str, asyncio.Queue[InboundUnit]] = {}
        self._workers: dict[str, asyncio.Task] = {}
        self._inflight_tasks: set[asyncio.Task] = set()
        self._schedulers: list[ScheduledActivityController] = []
        self._pending_attach: list[Device] = []
        self._commands_dirty = False

    @property
    def running(self) -> bool:
        return self._running

    # -- bot author API -------------------------------------------------

    def bind_devices(self, *devices: Device, session: Session | str | None = None) -> None:
        """Make devices routable (globally by default) and request platform attachment."""
        added = self.registry.bind(session, *devices)
        if not added:
            return
        if self._running:
            self._spawn(self._attach(added))
        else:
            self._pending_attach.extend(added)

    def set_my_commands(self, commands: Iterable[Mapping[str, str]]) -> None:
        for item in commands:
            self.router.describe_command(str(item["command"]), str(item.get("description", "")))
        if self._running:
            self._spawn(self._publish_commands())
        else:
            self._commands_dirty = True

    def command(self, name: str, handler: Handler | None = None, *, description: str = ""):  # type: ignore[no-untyped-def]
        return self.router.command(name, handler, description=description)

    def callback(self, value: str, handler: Handler | None = None):  # type: ignore[no-untyped-def]
        return self.router.callback(value, handler)

    def on_message(self, handler: Handler) -> Handler:
        return self.router.on_message(handler)

    def on_notify(self, handler: Handler) -> Handler:
        return self.router.on_notify(handler)

    def scheduler(
        self,
        action: Action,
        *,
        on_error: ErrorReporter | None = None,
        interval_resolver: IntervalResolver | None = None,
    ) -> ScheduledActivityController:
        controller = ScheduledActivityController(
            action,
            on_error=on_error,
            interval_resolver=interval_resolver,
            metrics=self.metrics,
        )
        self._schedulers.append(controller)
        return controller

    async def send_message(self, target: Session | Any, content: Any) -> None:
        """Fire-and-forget outbound message; delivery failures are logged only."""
        chat = target.chat if isinstance(target, Session) else target
        payload = content.to_dict() if isinstance(content, InlineKeyboard) else content
        try:
            await self.transport.send_message(chat, payload)
            self.metrics.record_message()
        except Exception as e:
            logger.warning(f"send_message failed chat_id={chat_key(chat)}: {e}")

    async def set_dev_message(self, session: Session, device: Device, request: RpcRequest) -> RpcResponse:
        return await self.bridge.call(session, device, request)

    # -- lifecycle --------------------------------------------------------

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        await self.transport.start()
        if self._pending_attach:
            pending, self._pending_attach = self._pending_attach, []
            await self._attach(pending)
        if self._commands_dirty:
            self._commands_dirty = False
            await self._publish_commands()
        self._event_task = asyncio.create_task(self._event_loop())
        logger.info("Bot runtime started")

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        for controller in self._schedulers:
            await controller.shutdown()
        await self.transport.stop()
        tasks = [self._event_task, *self._workers.values(), *self._inflight_tasks]
        for task in tasks:
            if task:
                task.cancel()
        for task in tasks:
            if task:
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._event_task = None
        self._workers.clear()
        self._queues.clear()
        self._inflight_tasks.clear()
        self.bridge.cancel_all()
        logger.info("Bot runtime stopped")

    async def drain(self) -> None:
        """Wait until every queued unit has been processed."""
        for queue in list(self._queues.values()):
            await queue.join()

    # -- inbound path -----------------------------------------------------

    async def _event_loop(self) -> None:
        async for raw in self.transport.recv_units():
            try:
                await self.handle_unit(raw)
            except Exception as e:
                logger.error(f"Bot runtime handle_unit failed: {e}")

    async def handle_unit(self, raw: Mapping[str, Any]) -> None:
        response = rpc_response(raw)
        if response is not None:
            self.bridge.resolve(response)

        unit = classify(raw)
        if isinstance(unit, UnknownUnit) and response is not None:
            return
        self.metrics.record_unit(unit.kind)
        session = self._session_for(unit)
        if session is None:
            logger.debug(f"Dropping {unit.kind} unit without chat")
            return
        logger.debug(f"bot-unit kind={unit.kind} chat_id={session.chat_id}")
        self._enqueue(session, unit)

    async def process(self, session: Session, unit: InboundUnit) -> DispatchOutcome:
        """Dispatch one unit under the session's serialization."""
        async with session.lock:
            return await self._dispatch_locked(session, unit)

    async def _dispatch_locked(self, session: Session, unit: InboundUnit) -> DispatchOutcome:
        ctx = BotContext(runtime=self, session=session, unit=unit)
        try:
            outcome = await self.router.dispatch(ctx)
        except UnboundDeviceError as e:
            self.metrics.record_handler_error()
            logger.error(f"Handler used unbound device chat_id={session.chat_id}: {e}")
            await self.send_message(session, f"⚠️ {e.describe()}")
            outcome = DispatchOutcome.FAILED
        except PixelBotError as e:
            self.metrics.record_handler_error()
            logger.warning(f"Handler failed chat_id={session.chat_id} kind={unit.kind}: {e}")
            await self.send_message(session, f"⚠️ {e.describe()}")
            outcome = DispatchOutcome.FAILED
        except Exception:
            self.metrics.record_handler_error()
            logger.exception(f"Unexpected handler error chat_id={session.chat_id} kind={unit.kind}")
            outcome = DispatchOutcome.FAILED
        self.metrics.record_dispatch(outcome)
        return outcome

    def _session_for(self, unit: InboundUnit) -> Session | None:
        if chat_key(unit.chat):
            return self.sessions.get_or_create(unit.chat)
        if isinstance(unit, NotifyUnit):
            chat_id = self.registry.session_for_device(unit.device_id) if unit.device_id else None
            session = self.sessions.get(chat_id) if chat_id else None
            return session or self.sessions.get_or_create({"id": DEVICE_CHAT_ID})
        return None

    def _enqueue(self, session: Session, unit: InboundUnit) -> None:
        queue = self._queues.get(session.chat_id)
        if queue is None:
            queue = asyncio.Queue()
            self._queues[session.chat_id] = queue
        worker = self._workers.get(session.chat_id)
        if worker is None or worker.done():
            self._workers[session.chat_id] = asyncio.create_task(self._session_worker(session, queue))
        queue.put_nowait(unit)

    async def _session_worker(self, session: Session, queue: asyncio.Queue[InboundUnit]) -> None:
        while True:
            unit = await queue.get()
            try:
                await self.process(session, unit)
            finally:
                queue.task_done()

    # -- outbound helpers -------------------------------------------------

    async def _attach(self, devices: list[Device]) -> None:
        try:
            await self.transport.attach_devices(devices)
            logger.info(f"Requested attachment for {len(devices)} device(s)")
        except Exception as e:
            logger.warning(f"Device attach request failed: {e}")

    async def _publish_commands(self) -> None:
        try:
            await self.transport.set_commands(self.router.commands())
        except Exception as e:
            logger.warning(f"set_commands failed: {e}")

    def _spawn(self, coro: Any) -> None:
        task = asyncio.create_task(coro)
        self._inflight_tasks.add(task)
        task.add_done_callback(self._inflight_tasks.discard)

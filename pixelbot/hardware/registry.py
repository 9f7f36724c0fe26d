"""Tracks which devices are routable from which sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pixelbot.errors import UnboundDeviceError
from pixelbot.hardware.device import Device

if TYPE_CHECKING:
    from pixelbot.session.manager import Session

GLOBAL_SCOPE = "*"


@dataclass(frozen=True, slots=True)
class Binding:
    """Permission to route RPCs from ``scope`` (a chat id or ``*``) to a device."""

    scope: str
    device_id: str

    @property
    def is_global(self) -> bool:
        return self.scope == GLOBAL_SCOPE


class DeviceSessionRegistry:
    """Many-to-many bindings between sessions and devices.

    Devices are referenced, not owned: the integrator creates them once and
    binds them either globally (every session may use them) or to specific
    sessions.
    """

    def __init__(self) -> None:
        self._devices: dict[str, Device] = {}
        self._bindings: set[Binding] = set()
        self._active_chat: dict[str, str] = {}

    def bind(self, session: Session | str | None, *devices: Device) -> list[Device]:
        """Bind devices; returns only those that were not bound before."""
        scope = _scope_of(session)
        added: list[Device] = []
        for device in devices:
            binding = Binding(scope=scope, device_id=device.device_id)
            known = self._devices.get(device.device_id)
            if known is not None and known is not device:
                raise ValueError(f"device id {device.device_id} already used by {known!r}")
            self._devices[device.device_id] = device
            if binding in self._bindings:
                continue
            self._bindings.add(binding)
            if known is None:
                added.append(device)
        return added

    def unbind(self, session: Session | str | None, device: Device) -> bool:
        binding = Binding(scope=_scope_of(session), device_id=device.device_id)
        if binding not in self._bindings:
            return False
        self._bindings.discard(binding)
        return True

    def resolve_binding(self, session: Session | str, device: Device) -> Binding:
        scope = _scope_of(session)
        if self._devices.get(device.device_id) is device:
            direct = Binding(scope=scope, device_id=device.device_id)
            if direct in self._bindings:
                return direct
            shared = Binding(scope=GLOBAL_SCOPE, device_id=device.device_id)
            if shared in self._bindings:
                return shared
        raise UnboundDeviceError(device.device_id, scope)

    def is_bound(self, session: Session | str, device: Device) -> bool:
        try:
            self.resolve_binding(session, device)
        except UnboundDeviceError:
            return False
        return True

    def devices(self) -> list[Device]:
        return list(self._devices.values())

    def associate(self, device: Device, session: Session | str) -> None:
        """Remember the chat currently driving a device."""
        self._active_chat[device.device_id] = _scope_of(session)

    def session_for_device(self, device_id: str) -> str | None:
        """Chat id associated with device-originated activity, if any."""
        return self._active_chat.get(device_id)

    def bindings(self) -> list[Binding]:
        return sorted(self._bindings, key=lambda b: (b.device_id, b.scope))


def _scope_of(session: Session | str | None) -> str:
    if session is None:
        return GLOBAL_SCOPE
    if isinstance(session, str):
        return session
    return session.chat_id

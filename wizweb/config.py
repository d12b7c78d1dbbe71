"""CAN bridge settings and the queue of frames received from the bus."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import IntEnum

DATA_BUF_MAX_SIZE = 1024 * 2
MAX_CAN_DATA_LEN = 8

CAN_PIO_INDEX = 0
CAN_RX_PIN = 4
CAN_TX_PIN = 5


class EthMode(IntEnum):
    """Role of the Ethernet side of the bridge."""

    TCP_SERVER = 0
    TCP_CLIENT = 1


class BaudRate(IntEnum):
    """Selectable CAN bus bit rates."""

    BDRATE_125 = 0
    BDRATE_250 = 1
    BDRATE_500 = 2

    def bits_per_second(self) -> int:
        """Bus speed in bits per second."""
        return _BITRATES[self]


_BITRATES = {
    BaudRate.BDRATE_125: 125000,
    BaudRate.BDRATE_250: 250000,
    BaudRate.BDRATE_500: 500000,
}

_MODE_NAMES = {
    EthMode.TCP_SERVER: "TCP Server",
    EthMode.TCP_CLIENT: "TCP Client",
}

_BAUD_NAMES = {
    BaudRate.BDRATE_125: "125kbps",
    BaudRate.BDRATE_250: "250kbps",
    BaudRate.BDRATE_500: "500kbps",
}


@dataclass
class CanConfig:
    """Operating mode and bit rate of the bridge."""

    eth_mode: EthMode = EthMode.TCP_SERVER
    baudrate: BaudRate = BaudRate.BDRATE_125


def default_can_config() -> CanConfig:
    """The settings used at start-up: TCP server at 125 kbps."""
    return CanConfig(EthMode.TCP_SERVER, BaudRate.BDRATE_125)


def format_can_config(config: CanConfig) -> str:
    """Render the settings as the human-readable summary printed at start-up."""
    lines = ["", "------------ CAN config ------------"]
    try:
        lines.append(f"\tmode : {_MODE_NAMES[EthMode(config.eth_mode)]}")
    except ValueError:
        pass
    try:
        lines.append(f"\tbaudrate : {_BAUD_NAMES[BaudRate(config.baudrate)]}")
    except ValueError:
        lines.append(f"\tErr) baudrate : {int(config.baudrate)}")
    lines.append("")
    lines.append("-------------------------------------")
    return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class CanMessage:
    """One CAN frame: identifier and up to eight data bytes."""

    id: int
    data: bytes = b""

    def __post_init__(self) -> None:
        if self.id < 0:
            raise ValueError(f"CAN id must not be negative: {self.id}")
        if len(self.data) > MAX_CAN_DATA_LEN:
            raise ValueError(f"CAN frame carries at most {MAX_CAN_DATA_LEN} bytes")
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def dlc(self) -> int:
        """Data length code: the number of data bytes."""
        return len(self.data)


@dataclass
class RxRingBuffer:
    """Fixed-size queue of received frames, shared between the bus and the network.

    The write index never waits for the reader: once it has gone all the way
    round and caught up with the read index, the queue reads as empty again.
    """

    capacity: int = DATA_BUF_MAX_SIZE
    receiving: bool = False
    _slots: list = field(init=False, repr=False)
    _push_idx: int = field(default=0, init=False, repr=False)
    _pop_idx: int = field(default=0, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be at least 1")
        # Indices run from 0 to capacity inclusive before wrapping.
        self._slots = [None] * (self.capacity + 1)

    def reset(self) -> None:
        """Drop every queued frame and start accepting new ones."""
        with self._lock:
            self._push_idx = 0
            self._pop_idx = 0
            self._slots = [None] * (self.capacity + 1)
            self.receiving = True

    def push(self, message: CanMessage) -> None:
        """Queue a received frame."""
        with self._lock:
            self._slots[self._push_idx] = message
            self._push_idx = (self._push_idx + 1) % len(self._slots)

    def pop(self) -> CanMessage:
        """Take the oldest queued frame; raise IndexError when there is none."""
        with self._lock:
            if self._pop_idx == self._push_idx:
                raise IndexError("pop from an empty receive buffer")
            message = self._slots[self._pop_idx]
            self._pop_idx = (self._pop_idx + 1) % len(self._slots)
            return message

    def __len__(self) -> int:
        with self._lock:
            return (self._push_idx - self._pop_idx) % len(self._slots)
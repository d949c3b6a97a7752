"""Transport layer: serial connection and request/response transactions."""

from .serial_connection import SerialConnection
from .transaction import Channel, discard_input, exchange, run_transaction

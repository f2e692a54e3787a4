"""
Message channel between the MIDI input thread and the polling thread.

The hardware callback (producer) only ever sends raw byte frames into the
channel; the uniform source (consumer) drains it without blocking once per
poll. The queue is the only object shared between the two threads.
"""

import queue
from typing import Optional


class MessageChannel:
    """
    Single-producer/single-consumer FIFO of raw MIDI byte frames.

    Closing the channel marks the producer side as gone: later sends are
    dropped, and the consumer sees `is_drained()` once the buffered frames
    have been received.
    """

    def __init__(self):
        self._queue: "queue.SimpleQueue[bytes]" = queue.SimpleQueue()
        self._closed = False

    def send(self, frame) -> bool:
        """
        Push a frame from the producer thread.

        Args:
            frame: Raw MIDI bytes (bytes, bytearray or list of ints)

        Returns:
            True if the frame was queued, False if the channel is closed
        """
        if self._closed:
            return False
        self._queue.put(bytes(frame))
        return True

    def try_recv(self) -> Optional[bytes]:
        """Receive the oldest buffered frame, or None if nothing is buffered."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def close(self):
        """Mark the producer side as disconnected."""
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def is_drained(self) -> bool:
        """True once the channel is closed and every buffered frame was received."""
        return self._closed and self._queue.empty()

    def __len__(self) -> int:
        return self._queue.qsize()

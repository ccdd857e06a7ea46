# -*- coding: utf-8 -*-

# Copyright 2019 Julian Betz
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
# 
#      http://www.apache.org/licenses/LICENSE-2.0
# 
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


import asyncio


_END = object()
"""Marks the end of the stream inside a channel queue."""


class BackpressureChannel:
    """Bounded channel between a single producer and a single consumer.

    The producer blocks in :meth:`put` while the channel is full or paused.  The
    consumer pauses the channel while it performs slow work (espc. flushing a
    batch to the store), which suspends the producer after its next item and
    bounds the number of items held in memory to the channel capacity plus the
    consumer's own working set.

    Iterate the channel asynchronously to consume items; iteration stops after
    the producer called :meth:`close`.

    :param int capacity: Maximum number of items waiting in the channel.

    """

    def __init__(self, capacity):
        if not isinstance(capacity, int) or capacity < 1:
            raise ValueError('Unable to create channel of capacity %r'
                             % (capacity,))
        self._queue = asyncio.Queue(maxsize=capacity)
        self._resumed = asyncio.Event()
        self._resumed.set()
        self._closed = False


    @property
    def paused(self):
        """Whether producers are currently held back."""
        return not self._resumed.is_set()


    def pause(self):
        """Suspend the producer before its next :meth:`put`."""
        self._resumed.clear()


    def resume(self):
        """Allow a suspended producer to continue."""
        self._resumed.set()


    def suspended(self):
        """Context manager that pauses the channel for the duration of a block.

        The channel is resumed on exit, regardless of whether the block raised.

        """
        return _Suspension(self)


    async def put(self, item):
        """Hand an item to the consumer, waiting while paused or full."""
        if self._closed:
            raise RuntimeError('Unable to put items into a closed channel')
        await self._resumed.wait()
        await self._queue.put(item)


    async def close(self):
        """Signal the end of the stream to the consumer."""
        if not self._closed:
            self._closed = True
            await self._queue.put(_END)


    def abort(self):
        """End the stream immediately, discarding the waiting items.

        Used by a failing producer, which must not block on a full channel.

        """
        self._closed = True
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_END)
        self._resumed.set()


    def __aiter__(self):
        return self


    async def __anext__(self):
        item = await self._queue.get()
        if item is _END:
            raise StopAsyncIteration
        return item


class _Suspension:
    """Pauses a channel on entering, resumes it on exiting."""

    def __init__(self, channel):
        self._channel = channel

    async def __aenter__(self):
        self._channel.pause()
        return self._channel

    async def __aexit__(self, exc_type, exc, tb):
        self._channel.resume()

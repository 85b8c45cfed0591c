import asyncio
import inspect

CHUNK_SIZE = 64 * 1024


async def _read_chunks(stream):
    if isinstance(stream, (bytes, bytearray, memoryview)):
        yield bytes(stream)
        return
    if hasattr(stream, "__aiter__"):
        async for chunk in stream:
            yield chunk
        return
    read = getattr(stream, "read", None)
    if read is not None:
        # blocking readers run off the event loop
        is_async = inspect.iscoroutinefunction(read)
        while True:
            if is_async:
                chunk = await read(CHUNK_SIZE)
            else:
                chunk = await asyncio.to_thread(read, CHUNK_SIZE)
            if not chunk:
                return
            yield chunk
        return
    for chunk in stream:
        yield chunk


async def read_stream(stream) -> bytes:
    """Drain ``stream`` into memory and return its full content.

    Accepts raw bytes, async iterables, objects with a sync or async
    ``read(size)`` method and plain iterables of chunks. Text chunks are
    encoded as UTF-8. Errors raised by the stream propagate unchanged.
    """
    buffer = bytearray()
    async for chunk in _read_chunks(stream):
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        buffer.extend(chunk)
    return bytes(buffer)

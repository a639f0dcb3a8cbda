"""Wire protocol — packet constants, binary detection, envelope codec.

Learn: Nothing in here does I/O. The codec turns (event, data, targeting)
into bytes and back, so it can be tested without Redis.
"""

"""A small 2D application framework: events, layers, input, cameras, batched rendering, images and profiling."""

__version__ = "0.1.0"
from .code_tracer import CodeTracer, trace
from .keywords import extract_keywords
from .line_shapes import LINE_SHAPES, describe_line

__all__ = ['CodeTracer', 'trace', 'extract_keywords', 'LINE_SHAPES', 'describe_line']

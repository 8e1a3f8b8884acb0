from tenant_loader.core.trace.trace_context import TraceContext

__all__ = ["TraceContext"]

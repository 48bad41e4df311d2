from app.domains.scheduling.infrastructure.audit.logging_audit_sink import LoggingAuditSink

__all__ = ["LoggingAuditSink"]

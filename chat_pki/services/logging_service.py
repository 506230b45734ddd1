"""
Logging and operation timing for the certificate bootstrap service.
"""
import json
import logging
import logging.handlers
import sys
import threading
import time
import traceback
from contextlib import contextmanager
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Any, Optional, List


@dataclass
class LogEntry:
    """Structured log entry for JSON logging."""
    timestamp: str
    level: str
    logger_name: str
    message: str
    module: str
    function: str
    line_number: int
    thread_id: int
    process_id: int
    extra_data: Optional[Dict[str, Any]] = None
    exception_info: Optional[Dict[str, Any]] = None


@dataclass
class PerformanceMetric:
    """Performance metric data structure."""
    operation: str
    duration_ms: float
    timestamp: str
    success: bool
    error_message: Optional[str] = None
    extra_data: Optional[Dict[str, Any]] = None


@dataclass
class ErrorMetric:
    """Error tracking metric data structure."""
    error_type: str
    error_message: str
    timestamp: str
    stack_trace: Optional[str] = None
    extra_data: Optional[Dict[str, Any]] = None


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = LogEntry(
            timestamp=datetime.fromtimestamp(record.created).isoformat(),
            level=record.levelname,
            logger_name=record.name,
            message=record.getMessage(),
            module=record.module,
            function=record.funcName,
            line_number=record.lineno,
            thread_id=record.thread,
            process_id=record.process,
            extra_data=getattr(record, 'extra_data', None)
        )

        if record.exc_info:
            log_entry.exception_info = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': traceback.format_exception(*record.exc_info)
            }

        return json.dumps(asdict(log_entry), default=str)


class PerformanceMonitor:
    """Performance monitoring and metrics collection."""

    def __init__(self):
        self.metrics: List[PerformanceMetric] = []
        self.lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    @contextmanager
    def measure_operation(self, operation: str, extra_data: Optional[Dict[str, Any]] = None):
        """Context manager to measure operation performance."""
        start_time = time.time()
        success = True
        error_message = None

        try:
            yield
        except Exception as e:
            success = False
            error_message = str(e)
            raise
        finally:
            duration_ms = (time.time() - start_time) * 1000

            metric = PerformanceMetric(
                operation=operation,
                duration_ms=duration_ms,
                timestamp=datetime.now().isoformat(),
                success=success,
                error_message=error_message,
                extra_data=extra_data
            )

            with self.lock:
                self.metrics.append(metric)

            self.logger.info(
                f"Performance metric: {operation}",
                extra={
                    'extra_data': {
                        'operation': operation,
                        'duration_ms': duration_ms,
                        'success': success,
                        'error_message': error_message,
                        **(extra_data if extra_data else {})
                    }
                }
            )

    def get_metrics(self, operation: Optional[str] = None,
                    since: Optional[datetime] = None) -> List[PerformanceMetric]:
        """Get performance metrics with optional filtering."""
        with self.lock:
            filtered_metrics = self.metrics.copy()

        if operation:
            filtered_metrics = [m for m in filtered_metrics if m.operation == operation]

        if since:
            since_iso = since.isoformat()
            filtered_metrics = [m for m in filtered_metrics if m.timestamp >= since_iso]

        return filtered_metrics

    def get_operation_stats(self, operation: str) -> Dict[str, Any]:
        """Get statistics for a specific operation."""
        metrics = self.get_metrics(operation=operation)

        if not metrics:
            return {}

        durations = [m.duration_ms for m in metrics]
        success_count = sum(1 for m in metrics if m.success)

        return {
            'operation': operation,
            'total_calls': len(metrics),
            'success_count': success_count,
            'failure_count': len(metrics) - success_count,
            'avg_duration_ms': sum(durations) / len(durations),
            'min_duration_ms': min(durations),
            'max_duration_ms': max(durations)
        }


class ErrorTracker:
    """Keeps the errors that aborted or degraded startup."""

    def __init__(self):
        self.errors: List[ErrorMetric] = []
        self.lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    def track_error(self, error: Exception, extra_data: Optional[Dict[str, Any]] = None):
        """Track an error occurrence."""
        error_metric = ErrorMetric(
            error_type=type(error).__name__,
            error_message=str(error),
            timestamp=datetime.now().isoformat(),
            stack_trace=''.join(traceback.format_exception(type(error), error, error.__traceback__)),
            extra_data=extra_data
        )

        with self.lock:
            self.errors.append(error_metric)

        self.logger.error(
            f"Error tracked: {error_metric.error_type}: {error_metric.error_message}",
            extra={'extra_data': {'error_type': error_metric.error_type, **(extra_data or {})}}
        )

    def get_errors(self, since: Optional[datetime] = None) -> List[ErrorMetric]:
        with self.lock:
            errors = self.errors.copy()
        if since:
            since_iso = since.isoformat()
            errors = [e for e in errors if e.timestamp >= since_iso]
        return errors


class LoggingService:
    """Configures logging handlers and collects operation metrics."""

    def __init__(self, config):
        """Initialize logging service with configuration."""
        self.config = config
        self.performance_monitor = PerformanceMonitor()
        self.error_tracker = ErrorTracker()
        self._setup_logging()
        self.logger = logging.getLogger(__name__)
        self.logger.info("Logging service initialized")

    def _setup_logging(self):
        """Setup logging configuration."""
        log_dir = Path(self.config.log_file_path).parent
        log_dir.mkdir(parents=True, exist_ok=True)

        # Clear existing handlers
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()

        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        root_logger.setLevel(log_level)

        json_formatter = JSONFormatter()
        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        file_handler = logging.handlers.RotatingFileHandler(
            filename=self.config.log_file_path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(json_formatter)
        file_handler.setLevel(log_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(log_level)

        error_log_path = str(Path(self.config.log_file_path).with_suffix('.errors.log'))
        error_handler = logging.handlers.RotatingFileHandler(
            filename=error_log_path,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding='utf-8'
        )
        error_handler.setFormatter(json_formatter)
        error_handler.setLevel(logging.ERROR)

        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)
        root_logger.addHandler(error_handler)

    def measure_performance(self, operation: str, extra_data: Optional[Dict[str, Any]] = None):
        """Get performance measurement context manager."""
        return self.performance_monitor.measure_operation(operation, extra_data)

    def track_error(self, error: Exception, extra_data: Optional[Dict[str, Any]] = None):
        self.error_tracker.track_error(error, extra_data)

    def get_performance_stats(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """Get performance statistics."""
        if operation:
            return self.performance_monitor.get_operation_stats(operation)

        all_metrics = self.performance_monitor.get_metrics()
        operations = set(m.operation for m in all_metrics)
        return {
            op: self.performance_monitor.get_operation_stats(op)
            for op in operations
        }

    def get_health_status(self) -> Dict[str, Any]:
        """Get overall health status of the logging system."""
        try:
            test_logger = logging.getLogger('health_check')
            test_logger.debug("Health check test log entry")

            recent_errors = self.error_tracker.get_errors(
                since=datetime.now() - timedelta(hours=1)
            )

            return {
                'status': 'healthy',
                'log_file_writable': True,
                'recent_errors': len(recent_errors),
                'recent_operations': len(self.performance_monitor.get_metrics(
                    since=datetime.now() - timedelta(hours=1)
                )),
                'timestamp': datetime.now().isoformat()
            }
        except Exception as e:
            return {
                'status': 'unhealthy',
                'error': str(e),
                'timestamp': datetime.now().isoformat()
            }

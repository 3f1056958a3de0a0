"""
Run Logger for Decade Restyle
Provides structured logging and an execution summary for one orchestration call
"""

import logging
import time
from datetime import datetime
from typing import Optional, Dict, Any, List

_module_logger = logging.getLogger("decade_restyle")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


class RunLogger:
    """Logger for tracking one generate call and producing its summary"""

    def __init__(self, name: str = "DecadeRestyle"):
        self.name = name
        self.start_time = time.time()
        self.logs: List[Dict[str, Any]] = []
        self.errors: List[str] = []
        self.warnings: List[str] = []

        self.input_info: Optional[Dict[str, Any]] = None
        self.attempts: List[Dict[str, Any]] = []
        self.fallback_info: Optional[Dict[str, Any]] = None
        self.outcome: Optional[Dict[str, Any]] = None

        self._finalized = False
        self._summary = ""

    def log(self, message: str, level: str = "INFO"):
        """Add a log entry"""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "elapsed": round(time.time() - self.start_time, 3),
            "level": level,
            "message": message
        }
        self.logs.append(entry)
        _module_logger.log(_LEVELS.get(level, logging.INFO), "[%s] %s", self.name, message)

    def add_error(self, message: str):
        """Add an error"""
        self.errors.append(message)
        self.log(message, level="ERROR")

    def add_warning(self, message: str):
        """Add a warning"""
        self.warnings.append(message)
        self.log(message, level="WARN")

    def set_input_info(self, mime_type: str, dimensions: str, size_bytes: int, prompt: str):
        """Record the validated input photo and prompt"""
        self.input_info = {
            "mime_type": mime_type,
            "dimensions": dimensions,
            "size_bytes": size_bytes,
            "prompt_length": len(prompt),
        }
        self.log(f"Input image: {mime_type}, {dimensions}, {size_bytes} bytes")

    def record_attempt(
        self,
        phase: str,
        attempt: int,
        model_id: str,
        latency: float,
        success: bool,
        error_class: Optional[str] = None,
        error: Optional[str] = None
    ):
        """Record a single remote call made by the retry executor"""
        self.attempts.append({
            "phase": phase,
            "attempt": attempt,
            "model": model_id,
            "latency": round(latency, 3),
            "success": success,
            "error_class": error_class,
            "error": error
        })
        if success:
            self.log(f"{phase} attempt {attempt} answered by {model_id} in {latency:.2f}s")
        else:
            self.add_warning(f"{phase} attempt {attempt} failed ({error_class}): {error}")

    def record_backoff(self, attempt: int, delay: float):
        """Record the delay scheduled before the next attempt"""
        self.log(f"Transient failure on attempt {attempt}, retrying in {delay:.1f}s")

    def set_fallback_info(self, decade: Optional[str], triggered: bool, reason: str):
        """Record the fallback decision"""
        self.fallback_info = {
            "decade": decade,
            "triggered": triggered,
            "reason": reason
        }
        if triggered:
            self.log(f"Retrying with fallback prompt for {decade}...")
        else:
            self.log(f"Fallback not attempted: {reason}")

    def set_outcome(self, kind: str, success: bool, detail: Optional[str] = None):
        """Record the final outcome handed back to the caller"""
        self.outcome = {
            "kind": kind,
            "success": success,
            "detail": detail
        }
        if success:
            self.log(f"Generation finished: {kind}")
        else:
            self.add_error(f"Generation failed ({kind}): {detail}")

    def finalize(self):
        """Finalize the log and generate summary"""
        if self._finalized:
            return

        self._finalized = True
        total_time = time.time() - self.start_time

        lines = []
        lines.append("=" * 50)
        lines.append("DECADE RESTYLE - EXECUTION SUMMARY")
        lines.append("=" * 50)
        lines.append(f"Total Time: {total_time:.2f}s")
        lines.append(f"Timestamp: {datetime.now().isoformat()}")
        lines.append("")

        if self.input_info:
            lines.append("--- Input ---")
            lines.append(f"MIME Type: {self.input_info['mime_type']}")
            lines.append(f"Dimensions: {self.input_info['dimensions']}")
            lines.append(f"Size: {self.input_info['size_bytes']} bytes")
            lines.append(f"Prompt Length: {self.input_info['prompt_length']} chars")
            lines.append("")

        if self.attempts:
            lines.append("--- Remote Calls ---")
            for a in self.attempts:
                status = "OK" if a["success"] else f"FAILED ({a['error_class']})"
                lines.append(f"  {a['phase']} #{a['attempt']}: {status} ({a['latency']:.2f}s)")
            lines.append("")

        if self.fallback_info:
            lines.append("--- Fallback ---")
            lines.append(f"Decade: {self.fallback_info['decade'] or 'N/A'}")
            lines.append(f"Triggered: {'Yes' if self.fallback_info['triggered'] else 'No'}")
            lines.append(f"Reason: {self.fallback_info['reason']}")
            lines.append("")

        if self.outcome:
            lines.append("--- Outcome ---")
            lines.append(f"Result: {self.outcome['kind']}")
            lines.append(f"Status: {'Success' if self.outcome['success'] else 'Failed'}")
            if self.outcome.get('detail'):
                lines.append(f"Detail: {self.outcome['detail']}")
            lines.append("")

        if self.errors:
            lines.append("--- Errors ---")
            for error in self.errors:
                lines.append(f"  ! {error}")
            lines.append("")

        if self.warnings:
            lines.append("--- Warnings ---")
            for warning in self.warnings:
                lines.append(f"  ? {warning}")
            lines.append("")

        lines.append("=" * 50)

        self._summary = "\n".join(lines)
        self.log("Execution finalized")

    def get_summary(self) -> str:
        """Get the execution summary"""
        if not self._finalized:
            self.finalize()
        return self._summary

    def to_dict(self) -> Dict[str, Any]:
        """Export log data as dictionary"""
        return {
            "total_time": time.time() - self.start_time,
            "input_info": self.input_info,
            "attempts": self.attempts,
            "fallback_info": self.fallback_info,
            "outcome": self.outcome,
            "errors": self.errors,
            "warnings": self.warnings,
            "logs": self.logs
        }

"""Error tracking and aggregation for bulk writes."""

from collections import defaultdict
from typing import Any, Dict, List, Optional
import logging

class ErrorTracker:
    """Count failures by type and keep a few samples of each."""
    
    def __init__(self, max_samples: int = 5):
        """Initialize error tracker.
        
        Args:
            max_samples: Maximum number of samples to store per error type
        """
        self.error_counts: Dict[str, int] = defaultdict(int)
        self.error_samples: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.max_samples = max_samples

    @property
    def total(self) -> int:
        return sum(self.error_counts.values())

    def __bool__(self) -> bool:
        return self.total > 0
        
    def add_error(self, error_type: str, message: str, context: Optional[Dict] = None) -> None:
        """Record one failure.
        
        Args:
            error_type: Category of error, e.g. WRITE_ERROR
            message: Error message
            context: Identifying data such as the company and spreadsheet row
        """
        self.error_counts[error_type] += 1
        if len(self.error_samples[error_type]) < self.max_samples:
            self.error_samples[error_type].append({
                'message': message,
                'context': context or {}
            })
    
    def get_summary(self) -> Dict:
        """Counts and samples per error type, ready for JSON output."""
        return {
            'counts': dict(self.error_counts),
            'samples': dict(self.error_samples)
        }
    
    def log_summary(self, logger: logging.Logger) -> None:
        """Log the failures recorded so far."""
        if not self.error_counts:
            return
            
        logger.warning("Error Summary:")
        for error_type, count in self.error_counts.items():
            logger.warning(f"  {error_type} ({count} occurrences):")
            for sample in self.error_samples[error_type]:
                details = ', '.join(f"{key}={value}" for key, value in sample['context'].items())
                logger.warning(f"    {sample['message']}" + (f" [{details}]" if details else ''))

"""
Configuration management for the painel CLI.
Handles loading and validating configuration from environment variables and files.
"""

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

DUPLICATE_POLICIES = ('skip', 'update', 'overwrite')

@dataclass
class Config:
    """Configuration settings for the painel CLI."""
    
    # Database settings
    database_url: str
    
    # Matching settings
    auto_accept_score: float = 0.9
    suggest_threshold: float = 0.3
    max_suggestions: int = 5
    
    # Import settings
    duplicate_policy: str = 'skip'
    user_name: str = 'Sistema'
    
    # Logging settings
    log_level: str = 'INFO'
    log_dir: Optional[Path] = None
    
    # Runtime settings
    interactive: bool = True
    dry_run: bool = False
    tv_tick_seconds: int = 1
    
    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Config':
        """Create configuration from environment variables.
        
        Args:
            env_file: Optional path to .env file
            
        Returns:
            Config: Configuration instance
            
        Raises:
            ValueError: If required environment variables are missing
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()
            
        database_url = os.getenv('DATABASE_URL')
        if not database_url:
            raise ValueError("DATABASE_URL environment variable is required")
            
        return cls(
            database_url=database_url,
            auto_accept_score=float(os.getenv('AUTO_ACCEPT_SCORE', '0.9')),
            suggest_threshold=float(os.getenv('SUGGEST_THRESHOLD', '0.3')),
            max_suggestions=int(os.getenv('MAX_SUGGESTIONS', '5')),
            duplicate_policy=os.getenv('DUPLICATE_POLICY', 'skip').lower(),
            user_name=os.getenv('PAINEL_USER', 'Sistema'),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            log_dir=Path(os.getenv('LOG_DIR')) if os.getenv('LOG_DIR') else None,
            interactive=os.getenv('INTERACTIVE', 'true').lower() == 'true',
            dry_run=os.getenv('DRY_RUN', 'false').lower() == 'true',
            tv_tick_seconds=int(os.getenv('TV_TICK_SECONDS', '1'))
        )
    
    def validate(self) -> bool:
        """Validate configuration settings.
        
        Returns:
            bool: True if configuration is valid
        """
        if self.log_dir and not self.log_dir.exists():
            try:
                self.log_dir.mkdir(parents=True, exist_ok=True)
            except Exception as e:
                raise ValueError(f"Failed to create log directory: {e}")
        
        if not 0.0 <= self.suggest_threshold <= self.auto_accept_score <= 1.0:
            raise ValueError("thresholds must satisfy 0 <= SUGGEST_THRESHOLD <= AUTO_ACCEPT_SCORE <= 1")
        if self.max_suggestions <= 0:
            raise ValueError("max_suggestions must be positive")
        if self.tv_tick_seconds <= 0:
            raise ValueError("tv_tick_seconds must be positive")
            
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(f"duplicate_policy must be one of: {', '.join(DUPLICATE_POLICIES)}")
            
        return True

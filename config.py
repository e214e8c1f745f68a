from dataclasses import dataclass
from solders.pubkey import Pubkey # type: ignore
import os
import logging
import yaml
from typing import Any, Optional
from pathlib import Path
from dotenv import load_dotenv

from utils.common_utils import parse_address

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / 'config.yaml'


@dataclass(frozen=True)
class WellKnownAddresses:
    """Program ids and reserved mints, built once from config and injected."""
    token_program: Pubkey
    assoc_token_acc_prog: Pubkey
    native_sol: Pubkey


class Config:
    """Configuration manager for the application"""

    def __init__(self, config_path: Optional[Path] = None):
        self._config = {}
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_env()
        self._load_yaml()
        self._validate_config()

    def _load_env(self):
        """Load environment variables"""
        load_dotenv(override=False)

        api_key = os.getenv('HELIUS_API_KEY')
        rpc_url = os.getenv('SOLANA_RPC_URL')
        ws_url = os.getenv('SOLANA_WS_URL')

        if not api_key and not rpc_url:
            raise ValueError("Missing required environment variable: HELIUS_API_KEY")

        # Explicit endpoints win over the Helius defaults
        self._config['env'] = {
            'helius': {
                'api_key': api_key,
                'rpc_url': rpc_url or f"https://mainnet.helius-rpc.com/?api-key={api_key}",
                'ws_url': ws_url or f"wss://mainnet.helius-rpc.com/?api-key={api_key}",
            },
        }

    def _load_yaml(self):
        """Load YAML configuration"""
        if not self._config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self._config_path}")

        with open(self._config_path) as f:
            self._config.update(yaml.safe_load(f) or {})

    def _validate_config(self):
        """Validate configuration"""
        required_keys = ['solana', 'tokens', 'constants', 'raydium']
        for key in required_keys:
            if key not in self._config:
                raise ValueError(f"Missing required configuration key: {key}")

        constants = self._config.get('constants', {})
        for key in ('token_program', 'assoc_token_acc_prog'):
            if key not in constants:
                raise ValueError(f"Missing program address constant: {key}")

        tokens = self._config.get('tokens', {})
        if 'address' not in tokens.get('native_sol', {}):
            raise ValueError("Missing token address: tokens.native_sol.address")

        if 'pools_url' not in self._config.get('raydium', {}):
            raise ValueError("Missing Raydium pools URL configuration")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key"""
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_solana_rpc_url(self) -> str:
        """Get RPC URL string"""
        return self._config['env']['helius']['rpc_url']

    def get_solana_ws_url(self) -> str:
        """Get websocket URL string"""
        return self._config['env']['helius']['ws_url']

    def get_well_known_addresses(self) -> WellKnownAddresses:
        """Parse the address tables into an immutable structure"""
        constants = self._config['constants']
        tokens = self._config['tokens']
        return WellKnownAddresses(
            token_program=parse_address(constants['token_program']),
            assoc_token_acc_prog=parse_address(constants['assoc_token_acc_prog']),
            native_sol=parse_address(tokens['native_sol']['address']),
        )

    # Constants getters
    @property
    def POOLS_URL(self) -> str:
        """Get Raydium liquidity pool directory URL"""
        return self._config['raydium']['pools_url']

    @property
    def RPC_TIMEOUT(self) -> float:
        """Get per-request RPC timeout in seconds"""
        return float(self._config['solana'].get('rpc_timeout', 30))

    @property
    def CONFIRM_TIMEOUT(self) -> float:
        """Get finalized-confirmation timeout in seconds"""
        return float(self._config['solana'].get('confirm_timeout', 90))

    @property
    def SKIP_PREFLIGHT(self) -> bool:
        """Get whether submission skips local simulation"""
        return bool(self._config['solana'].get('skip_preflight', False))

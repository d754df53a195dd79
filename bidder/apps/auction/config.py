"""
Bidder app config
"""
import tomllib
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any

from bidder.sui.model import ObjectId, normalize_sui_address

# public full node RPC URLs
SUI_RPC_URLS: dict[str, str] = {
    "mainnet": "https://fullnode.mainnet.sui.io:443",
    "testnet": "https://fullnode.testnet.sui.io:443",
    "devnet": "https://fullnode.devnet.sui.io:443",
    "localnet": "http://127.0.0.1:9000",
}


@dataclass(slots=True)
class BidderConfig:
    """
    TOML config file format::

        [sui]
        # either a network name (mainnet, testnet, devnet, localnet) or a full node RPC URL
        rpc_url = "testnet"
        package_id = "0x..."
        registry_id = "0x..."   # optional

        [watcher]               # optional
        poll_interval_secs = 3
        batch_size = 50

        [logging]               # optional
        level = "INFO"
    """

    # pylint: disable=too-many-instance-attributes

    rpc_url: str
    package_id: ObjectId
    registry_id: ObjectId | None = None
    poll_interval: timedelta = timedelta(seconds=3)
    batch_size: int = 50
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "BidderConfig":
        """
        :exception ValueError: if a required setting is missing or invalid
        """
        sui = config.get("sui", {})
        watcher = config.get("watcher", {})
        logging_config = config.get("logging", {})

        if "rpc_url" not in sui:
            raise ValueError("[sui] rpc_url is required")
        if "package_id" not in sui:
            raise ValueError("[sui] package_id is required")

        poll_interval_secs = watcher.get("poll_interval_secs", 3)
        batch_size = watcher.get("batch_size", 50)
        if poll_interval_secs <= 0:
            raise ValueError("[watcher] poll_interval_secs must be > 0")
        if not 0 < batch_size <= 50:
            raise ValueError("[watcher] batch_size must be in range [1, 50]")

        rpc_url = sui["rpc_url"]
        registry_id = sui.get("registry_id")
        return cls(
            rpc_url=SUI_RPC_URLS.get(rpc_url, rpc_url),
            package_id=ObjectId(normalize_sui_address(sui["package_id"])),
            registry_id=ObjectId(normalize_sui_address(registry_id))
            if registry_id
            else None,
            poll_interval=timedelta(seconds=poll_interval_secs),
            batch_size=batch_size,
            log_level=logging_config.get("level", "WARNING"),
        )

    @classmethod
    def from_config_file(cls, file: Path) -> "BidderConfig":
        """
        Loads the config from the specified TOML config file
        """
        with open(file, "rb") as config_file:
            config = tomllib.load(config_file)
        return cls.from_dict(config)

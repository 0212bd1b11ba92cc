# hbsbuild/core/data_loader.py
import json
from typing import Any
import structlog

from .ledger import DependencyLedger

log = structlog.get_logger(__name__)

class DataLoader:
    # resolves the 'data' option into the value templates are rendered with.
    def __init__(self, ledger: DependencyLedger):
        self.ledger = ledger

    def load(self, data_option: Any) -> Any:
        """
        A string is first tried as the path of a JSON file; if it cannot be read
        or parsed, the string itself becomes the data. Anything else is used as is.
        """
        if not (data_option and isinstance(data_option, str)):
            return data_option

        try:
            data_from_file = json.loads(self.ledger.read_file(data_option))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            log.info("data_option_not_a_json_file_using_it_as_data", data=data_option, error=str(e))
            return data_option

        log.debug("data_loaded_from_json_file", path=data_option)
        return data_from_file

from specguard.contract.parsers.registry import detect_surface, get_parser, parse_contract

__all__ = ["detect_surface", "get_parser", "parse_contract"]

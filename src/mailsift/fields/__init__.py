from mailsift.fields.addresses import parse_address_list, parse_single_address
from mailsift.fields.dates import parse_date

__all__ = ["parse_address_list", "parse_date", "parse_single_address"]

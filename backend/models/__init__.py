from models.accounts import Account, AccountType, AccountStatus
from models.journals import Journal, JournalType, JournalStatus
from models.journal_entries import JournalEntry
from models.sales import Sale, SaleStatus

__all__ = ['Account', 'AccountStatus', 'AccountType', 'Journal', 'JournalEntry', 'JournalStatus', 'JournalType', 'Sale', 'SaleStatus',]

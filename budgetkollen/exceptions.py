"""Calculator exceptions"""


class BudgetError(Exception):
    """Base exception for the calculator core"""

    pass


class CsvImportError(BudgetError):
    """A CSV import could not produce a calculator state"""

    pass


class ValidationError(CsvImportError):
    """CSV content is malformed or a required value is missing or not a number"""

    pass


class FileReadError(CsvImportError):
    """The uploaded file could not be read"""

    pass


class ImportInProgressError(CsvImportError):
    """Another import is still running on the same importer"""

    pass


class CsvExportError(BudgetError, ValueError):
    """State contains ids that cannot be written to the flat CSV format"""

    pass

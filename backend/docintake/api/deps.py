from docintake.services.extraction_service import ExtractionService


def get_extraction_service() -> ExtractionService:
    """
    Service dependency for extraction flows.
    Using Depends(get_extraction_service) allows easy overriding in tests.
    """
    return ExtractionService()

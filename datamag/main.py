from datamag.core.application import create_application

# Global instance for uvicorn: `uvicorn datamag.main:app --reload`
app = create_application()

from app.routers.datasource import router as datasource_router

__all__ = ["datasource_router"]

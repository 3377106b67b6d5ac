import logging

from fastapi import APIRouter, FastAPI, HTTPException, Request, Response

from category_service import CategoryOrderService
from codec import EXPORT_FILENAME, EXPORT_MIME_TYPE, DiaryCodec, DiaryImportError
from config import APP_VERSION, YamlConfig, db_path_from_env, settings_path_from_env
from db import CategoryOrderRepository, DiaryRepository, KeyValueRepository, ThemeRepository
from diary_service import DiaryService, NotFoundError
from navigation import Navigator
from view_selector import ALL_CATEGORIES, ViewSelector

logger = logging.getLogger(__name__)


class DiaryAPI:
    """Local JSON API exposing the workout diary to a presentation layer."""

    def __init__(
        self,
        db_path: str = "workout_diary.db",
        yaml_path: str = "settings.yaml",
    ) -> None:
        self.db_path = db_path
        self.config = YamlConfig(yaml_path)
        self.settings = self.config.settings()
        self.storage = KeyValueRepository(db_path)
        self.diary_repo = DiaryRepository(
            self.storage,
            self.settings.categories,
            self.settings.category_migrations,
            seed_on_empty=self.settings.seed_on_empty,
        )
        self.category_order = CategoryOrderRepository(self.storage)
        self.theme = ThemeRepository(self.storage, self.settings.theme)
        self.diary = DiaryService(self.diary_repo, self.settings.categories)
        self.categories = CategoryOrderService(
            self.category_order, self.settings.categories
        )
        self.codec = DiaryCodec(self.settings.category_migrations)
        self.navigator = Navigator(
            self.diary, self.categories, self.settings.history_limit
        )
        self.app = FastAPI(
            title="Workout Diary API",
            description="Local API for the workout diary",
            version=APP_VERSION,
        )
        self._setup_routes()

    def import_text(self, text: str) -> int:
        """Replace the diary with imported ``text`` and return the exercise count."""
        tree = self.codec.import_text(text)
        self.diary.replace_state(tree)
        return len(tree["exercises"])

    def export_text(self) -> str:
        return self.codec.export(self.diary.state)

    def _setup_routes(self) -> None:
        categories_router = APIRouter(prefix="/categories", tags=["Categories"])
        exercises_router = APIRouter(prefix="/exercises", tags=["Exercises"])

        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and storage connectivity.",
        )
        def health():
            """Return API and storage status."""
            try:
                self.storage.keys()
                return {"status": "ok"}
            except Exception as e:  # pragma: no cover - storage failure
                raise HTTPException(status_code=500, detail=str(e))

        @categories_router.get("")
        def list_categories(active: str = ALL_CATEGORIES):
            return ViewSelector.category_tabs(
                self.diary.exercises, self.categories.order(), active
            )

        @categories_router.post("/reorder")
        def reorder_categories(moved: str, target: str):
            return {"order": self.categories.reorder(moved, target)}

        @categories_router.delete("/order")
        def reset_category_order():
            self.categories.reset()
            return {"order": self.categories.order()}

        @exercises_router.get("")
        def list_exercises(category: str = ALL_CATEGORIES):
            return self.navigator.show_home(category)

        @exercises_router.post("")
        def create_exercise(name: str, category: str):
            try:
                return {"id": self.diary.create_exercise(name, category)}
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @exercises_router.get("/{exercise_id}")
        def get_exercise(exercise_id: str):
            if self.diary.get_exercise(exercise_id) is None:
                raise HTTPException(status_code=404, detail="not found")
            return self.navigator.show_detail(exercise_id)

        @exercises_router.put("/{exercise_id}")
        def edit_exercise(exercise_id: str, name: str, category: str):
            try:
                self.diary.edit_exercise(exercise_id, name, category)
                return {"status": "updated"}
            except NotFoundError as e:
                raise HTTPException(status_code=404, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @exercises_router.delete("/{exercise_id}")
        def delete_exercise(exercise_id: str):
            self.diary.delete_exercise(exercise_id)
            return {"status": "deleted"}

        @exercises_router.post("/{exercise_id}/entries")
        def create_entry(
            exercise_id: str,
            date: str | None = None,
            warmup: float = 0,
            working: float = 0,
        ):
            try:
                eid = self.diary.create_entry(exercise_id, date, warmup, working)
                return {"id": eid}
            except NotFoundError as e:
                raise HTTPException(status_code=404, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @exercises_router.put("/{exercise_id}/entries/{entry_id}")
        def edit_entry(
            exercise_id: str,
            entry_id: str,
            date: str,
            warmup: float,
            working: float,
        ):
            try:
                self.diary.edit_entry(exercise_id, entry_id, date, warmup, working)
                return {"status": "updated"}
            except NotFoundError as e:
                raise HTTPException(status_code=404, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @exercises_router.patch("/{exercise_id}/entries/{entry_id}/{field}")
        def edit_entry_field(exercise_id: str, entry_id: str, field: str, value: str):
            try:
                changed = self.diary.edit_entry_field(exercise_id, entry_id, field, value)
            except NotFoundError as e:
                raise HTTPException(status_code=404, detail=str(e))
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"status": "updated" if changed else "ignored"}

        @exercises_router.delete("/{exercise_id}/entries/{entry_id}")
        def delete_entry(exercise_id: str, entry_id: str):
            self.diary.delete_entry(exercise_id, entry_id)
            return {"status": "deleted"}

        @self.app.get("/export")
        def export_diary():
            return Response(
                content=self.export_text(),
                media_type=EXPORT_MIME_TYPE,
                headers={
                    "Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'
                },
            )

        @self.app.post("/import")
        async def import_diary(request: Request):
            try:
                text = (await request.body()).decode("utf-8")
                count = self.import_text(text)
            except (DiaryImportError, UnicodeDecodeError) as e:
                logger.info("Rejected import: %s", e)
                raise HTTPException(status_code=400, detail=str(e))
            return {"status": "imported", "exercises": count}

        @self.app.get("/theme")
        def get_theme():
            return {"theme": self.theme.get()}

        @self.app.put("/theme")
        def set_theme(theme: str):
            try:
                self.theme.set(theme)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"theme": theme}

        @self.app.post("/theme/toggle")
        def toggle_theme():
            return {"theme": self.theme.toggle()}

        self.app.include_router(categories_router)
        self.app.include_router(exercises_router)


def create_app() -> FastAPI:
    return DiaryAPI(db_path_from_env(), settings_path_from_env()).app


if __name__ == "__main__":
    import uvicorn

    api = DiaryAPI(db_path_from_env(), settings_path_from_env())
    logging.basicConfig(level=api.settings.log_level)
    uvicorn.run(api.app, host="127.0.0.1", port=8000)

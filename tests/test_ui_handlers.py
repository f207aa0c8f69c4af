from pathlib import Path
from unittest import mock, TestCase

import pytest

pytest.importorskip("customtkinter")

from domain.ai_status import AIResultStatus, CompletionOutcome  # noqa: E402
from domain.app_state import GenerationStarted, HomeState, PhotoSelected, Store, reduce_home  # noqa: E402
from domain.generation import GenerationResult  # noqa: E402
from domain.models import PhotoAsset, ProductDescription  # noqa: E402
from domain.prompt import GENERATION_FAILED_MESSAGE, MISSING_PHOTO_MESSAGE  # noqa: E402
from presentation.ui_app import ProductSnapApp  # noqa: E402


def _photo(name: str = "lamp.jpg") -> PhotoAsset:
    return PhotoAsset(path=Path(name), mime_type="image/jpeg", base64_data="AAAA")


def _bare_app(photo: PhotoAsset = None) -> ProductSnapApp:
    app = object.__new__(ProductSnapApp)
    app.store = Store(HomeState(), reduce_home)
    if photo is not None:
        app.store.dispatch(PhotoSelected(photo))
    app.rendered = []
    app.store.subscribe(app.rendered.append)
    return app


class UIHandlerTest(TestCase):
    def test_generation_success_updates_store(self):
        photo = _photo()
        app = _bare_app(photo)
        app.store.dispatch(GenerationStarted(photo))
        description = ProductDescription(title="Blue Lamp", description="A nice lamp.")
        result = GenerationResult(outcome=CompletionOutcome.success("raw"), description=description)

        with mock.patch("presentation.ui_app.messagebox.showerror") as error_box:
            ProductSnapApp._handle_generation_result(app, photo, result)

        error_box.assert_not_called()
        self.assertEqual(description, app.store.state.result)
        self.assertFalse(app.store.state.loading)
        self.assertEqual(2, len(app.rendered))

    def test_generation_failure_shows_fallback_message(self):
        photo = _photo()
        app = _bare_app(photo)
        result = GenerationResult(
            outcome=CompletionOutcome.failure(AIResultStatus.API_ERROR, "HTTP 500"),
            user_message=GENERATION_FAILED_MESSAGE,
        )

        with mock.patch("presentation.ui_app.messagebox.showerror") as error_box:
            ProductSnapApp._handle_generation_result(app, photo, result)

        error_box.assert_called_once()
        self.assertIn(GENERATION_FAILED_MESSAGE, error_box.call_args.args)
        self.assertEqual(GENERATION_FAILED_MESSAGE, app.store.state.error)
        self.assertIsNone(app.store.state.result)

    def test_result_for_replaced_photo_is_not_shown(self):
        old, new = _photo("old.jpg"), _photo("new.jpg")
        app = _bare_app(old)
        app.store.dispatch(GenerationStarted(old))
        # Remplacement direct dans le store (l'UI refuse pendant la génération)
        app.store.dispatch(PhotoSelected(new))
        late = GenerationResult(
            outcome=CompletionOutcome.success("raw"),
            description=ProductDescription(title="Old lamp", description=""),
        )

        ProductSnapApp._handle_generation_result(app, old, late)

        self.assertEqual(new, app.store.state.photo)
        self.assertIsNone(app.store.state.result)

    def test_photo_change_refused_while_generating(self):
        photo = _photo()
        app = _bare_app(photo)
        app.store.dispatch(GenerationStarted(photo))

        with mock.patch("presentation.ui_app.filedialog.askopenfilename") as dialog:
            ProductSnapApp.select_photo(app)

        dialog.assert_not_called()
        self.assertEqual(photo, app.store.state.photo)
        self.assertTrue(app.store.state.loading)

    def test_generate_without_photo_warns(self):
        app = _bare_app()
        with mock.patch("presentation.ui_app.messagebox.showwarning") as warn_box:
            ProductSnapApp.generate_details(app)

        warn_box.assert_called_once()
        self.assertIn(MISSING_PHOTO_MESSAGE, warn_box.call_args.args)
        self.assertFalse(app.store.state.loading)

    def test_generate_runs_in_background_thread(self):
        app = _bare_app(_photo())
        provider = mock.Mock()
        app.get_selected_provider = lambda: provider
        app.after = mock.Mock()

        with mock.patch("presentation.ui_app.threading.Thread") as thread_cls:
            ProductSnapApp.generate_details(app)

        self.assertTrue(app.store.state.loading)
        thread_cls.assert_called_once()
        self.assertTrue(thread_cls.call_args.kwargs["daemon"])
        thread_cls.return_value.start.assert_called_once()

"""Tests for the Qt controllers, with fake workers standing in for threads."""
import pytest
from PyQt5.QtCore import Qt

from inkstamp.config import EditorConfig
from inkstamp.controllers import AnnotationController, DocumentController, ExportController
from inkstamp.controllers.export_controller import GENERIC_EXPORT_ERROR
from inkstamp.core.annotations import ActiveTool, ImageAnnotation, PlacementStore, TextAnnotation
from inkstamp.core.document import DecodedDocument, DocumentSession
from inkstamp.core.geometry import PageRect

from tests.conftest import FakeSignal

PAGE = PageRect(left=100, top=50, width=600, height=800)


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)


@pytest.fixture
def store():
    s = PlacementStore()
    s.set_page_count(2)
    return s


@pytest.fixture
def controller(store):
    return AnnotationController(store, EditorConfig())


# ----------------------------------------------------------------------
# AnnotationController
# ----------------------------------------------------------------------

def test_click_places_text_and_disarms_tool(controller, store):
    changed = Recorder()
    controller.annotations_changed.connect(changed)
    controller.start_text_placement()

    annotation_id = controller.handle_page_click(1, 400, 250, PAGE, text="Signed")

    annotation = store.get_annotation(annotation_id)
    assert isinstance(annotation, TextAnnotation)
    assert annotation.page == 2
    assert (annotation.x, annotation.y) == pytest.approx((0.5, 0.25))
    assert (annotation.display_width, annotation.display_height) == (600, 800)
    assert annotation.color == (17, 17, 17)
    assert store.active_tool is ActiveTool.NONE
    assert controller.selected_id == annotation_id
    assert len(changed.calls) == 1


def test_text_click_without_text_cancels(controller, store):
    controller.start_text_placement()
    assert controller.handle_page_click(0, 400, 250, PAGE, text="") is None
    assert store.get_annotation_count() == 0
    assert store.active_tool is ActiveTool.NONE


def test_click_places_pending_image(controller, store):
    controller.start_image_placement("/signs/sig.png")
    annotation_id = controller.handle_page_click(0, 100, 50, PAGE)

    annotation = store.get_annotation(annotation_id)
    assert isinstance(annotation, ImageAnnotation)
    assert annotation.image_src == "/signs/sig.png"
    assert (annotation.x, annotation.y) == (0.0, 0.0)
    assert (annotation.width, annotation.height) == (150, 75)


def test_click_without_document_is_ignored(controller, store):
    store.set_page_count(0)
    controller.start_text_placement()
    assert controller.handle_page_click(0, 400, 250, PAGE, text="x") is None
    assert store.get_annotation_count() == 0
    assert store.active_tool is ActiveTool.TEXT


def test_click_without_tool_clears_selection(controller, store):
    controller.start_text_placement()
    controller.handle_page_click(0, 400, 250, PAGE, text="x")
    controller.handle_page_click(0, 10, 10, PAGE)
    assert controller.selected_id is None
    assert store.get_annotation_count() == 1


def test_drag_follows_pointer_on_same_page(controller, store):
    annotation_id = store.add_text(page=1, x=0.1, y=0.1, display_width=600,
                                   display_height=800, text="drag me")
    assert controller.begin_drag(annotation_id)

    reflowed = PageRect(left=0, top=0, width=300, height=400)
    assert controller.drag_to(0, 150, 100, reflowed)
    assert (store.get_annotation(annotation_id).x,
            store.get_annotation(annotation_id).y) == pytest.approx((0.5, 0.25))

    assert not controller.drag_to(1, 10, 10, reflowed)
    controller.end_drag()
    assert not controller.drag_to(0, 0, 0, reflowed)
    assert store.get_annotation(annotation_id).x == pytest.approx(0.5)


def test_nudge_selected(controller, store):
    annotation_id = store.add_text(page=1, x=0.5, y=0.5, display_width=600,
                                   display_height=800, text="n")
    controller.select(annotation_id)

    assert controller.nudge_selected(Qt.Key_Right, False, PAGE)
    assert controller.nudge_selected(Qt.Key_Up, True, PAGE)
    annotation = store.get_annotation(annotation_id)
    assert annotation.x == pytest.approx(0.5 + 1 / 600)
    assert annotation.y == pytest.approx(0.5 - 10 / 800)

    assert not controller.nudge_selected(Qt.Key_A, False, PAGE)


def test_delete_clears_selection(controller, store):
    annotation_id = store.add_text(page=1, x=0.5, y=0.5, display_width=600,
                                   display_height=800, text="n")
    controller.select(annotation_id)
    assert controller.delete_annotation(annotation_id)
    assert controller.selected_id is None
    assert not controller.delete_annotation(annotation_id)


def test_clear_all(controller, store):
    store.add_text(page=1, x=0.5, y=0.5, display_width=600, display_height=800, text="n")
    controller.start_image_placement("sig.png")
    controller.clear_all()
    assert store.get_annotation_count() == 0
    assert store.active_tool is ActiveTool.NONE


# ----------------------------------------------------------------------
# DocumentController
# ----------------------------------------------------------------------

class FakeLoadWorker:
    def __init__(self, data):
        self.data = data
        self.loaded = FakeSignal()
        self.failed = FakeSignal()
        self.started = False

    def start(self):
        self.started = True

    def wait(self):
        return True


class WorkerFactory:
    def __init__(self, worker_cls):
        self.worker_cls = worker_cls
        self.workers = []

    def __call__(self, *args):
        worker = self.worker_cls(*args)
        self.workers.append(worker)
        return worker


def test_open_bytes_loads_document(pdf_bytes, store):
    session = DocumentSession()
    factory = WorkerFactory(FakeLoadWorker)
    documents = DocumentController(session, store, worker_factory=factory)
    loaded = Recorder()
    documents.document_loaded.connect(loaded)

    store.add_text(page=1, x=0.1, y=0.1, display_width=600, display_height=800, text="old")
    assert documents.open_bytes("new.pdf", pdf_bytes)
    assert store.get_annotation_count() == 0
    assert session.is_loading

    worker = factory.workers[0]
    assert worker.started and worker.data == pdf_bytes
    worker.loaded.emit(DecodedDocument(page_count=3, page_sizes=[(612.0, 792.0)] * 3))

    assert session.is_loaded
    assert store.page_count == 3
    assert loaded.calls == [(3,)]


def test_rejected_upload_reports_error(store):
    documents = DocumentController(DocumentSession(), store,
                                   worker_factory=WorkerFactory(FakeLoadWorker))
    errors = Recorder()
    documents.error_occurred.connect(errors)

    assert not documents.open_bytes("notes.txt", b"hi", "text/plain")
    assert errors.calls == [("Only PDF files are allowed.",)]


def test_superseded_load_is_ignored(pdf_bytes, store):
    session = DocumentSession()
    factory = WorkerFactory(FakeLoadWorker)
    documents = DocumentController(session, store, worker_factory=factory)

    documents.open_bytes("first.pdf", pdf_bytes)
    documents.open_bytes("second.pdf", pdf_bytes)
    first, second = factory.workers

    first.loaded.emit(DecodedDocument(page_count=9))
    assert session.is_loading

    second.failed.emit("Error loading PDF: broken")
    assert session.error == "Error loading PDF: broken"
    assert store.page_count == 0


# ----------------------------------------------------------------------
# ExportController
# ----------------------------------------------------------------------

class FakeExportWorker:
    def __init__(self, exporter, document_bytes, annotations, output_path):
        self.document_bytes = document_bytes
        self.annotations = list(annotations)
        self.output_path = output_path
        self.finished = FakeSignal()
        self.started = False

    def start(self):
        self.started = True

    def wait(self):
        return True


@pytest.fixture
def export_setup(pdf_bytes, store):
    session = DocumentSession()
    session.accept_upload("contract.pdf", pdf_bytes)
    session.load()
    factory = WorkerFactory(FakeExportWorker)
    exports = ExportController(session, store, exporter=object(), worker_factory=factory)
    return exports, factory


def test_export_runs_one_at_a_time(export_setup, tmp_path):
    exports, factory = export_setup
    finished = Recorder()
    exports.export_finished.connect(finished)

    assert exports.start_export(str(tmp_path))
    assert exports.is_exporting
    assert not exports.start_export(str(tmp_path))
    assert len(factory.workers) == 1

    worker = factory.workers[0]
    assert worker.output_path == str(tmp_path / "contract-annotated.pdf")
    worker.finished.emit(True, worker.output_path)

    assert not exports.is_exporting
    assert finished.calls == [(True, worker.output_path)]
    assert exports.start_export(str(tmp_path))


def test_export_failure_uses_generic_message(export_setup, tmp_path):
    exports, factory = export_setup
    finished = Recorder()
    exports.export_finished.connect(finished)

    exports.start_export(str(tmp_path))
    factory.workers[0].finished.emit(False, "Export failed: disk full")

    assert finished.calls == [(False, GENERIC_EXPORT_ERROR)]
    assert not exports.is_exporting


class FailOnceFactory(WorkerFactory):
    def __init__(self):
        super().__init__(FakeExportWorker)
        self.failed = False

    def __call__(self, *args):
        if not self.failed:
            self.failed = True
            raise RuntimeError("thread could not be created")
        return super().__call__(*args)


def test_export_that_cannot_start_releases_flag(pdf_bytes, store, tmp_path):
    session = DocumentSession()
    session.accept_upload("contract.pdf", pdf_bytes)
    session.load()
    factory = FailOnceFactory()
    exports = ExportController(session, store, exporter=object(), worker_factory=factory)
    finished = Recorder()
    exports.export_finished.connect(finished)

    assert not exports.start_export(str(tmp_path))
    assert not exports.is_exporting
    assert finished.calls == [(False, GENERIC_EXPORT_ERROR)]

    assert exports.start_export(str(tmp_path))
    assert len(factory.workers) == 1

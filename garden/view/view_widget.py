"""Qt widget painting the animated garden.

The widget owns a :class:`~garden.engine.GardenEngine` and drives it with a
``QTimer``: every tick advances the animation by one frame and schedules a
repaint, and every repaint regenerates the whole scene from the engine state.
Mouse and touch events are translated into the engine's gesture calls and the
outcome is published through two signals:

* ``treeSelected(object)`` carries a :class:`~garden.model.Tree` snapshot.
* ``treeMoved(str, float)`` carries the tree id and its final horizontal
  position.

Two backends are available, as for any QPainter based view: an OpenGL widget
when the platform offers one and a plain raster ``QWidget`` otherwise.  The
:func:`GardenViewWidget` factory picks the best one.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Iterable, Mapping, Optional

from PyQt5 import QtCore, QtGui, QtWidgets

from ..engine import Dot, GardenEngine
from ..geometry import RGBA, Blossom, BlossomShape, Stroke, TreeGeometry, parse_color
from ..interaction import GestureState, InputKind
from ..model import Tree, clamp01
from ..store import TreeLike

logger = logging.getLogger(__name__)

__all__ = ["GardenViewWidget"]


def _qcolor(color: RGBA, alpha_scale: float = 1.0) -> QtGui.QColor:
    r, g, b, a = color
    col = QtGui.QColor(r, g, b)
    col.setAlphaF(clamp01(a * alpha_scale))
    return col


def _glow_brush(center: QtCore.QPointF, radius: float, color: RGBA, alpha_scale: float = 1.0) -> QtGui.QBrush:
    gradient = QtGui.QRadialGradient(center, max(radius, 0.5))
    gradient.setColorAt(0.0, _qcolor(color, 0.6 * alpha_scale))
    gradient.setColorAt(1.0, _qcolor(color, 0.0))
    return QtGui.QBrush(gradient)


class _ViewWidgetBase:
    """Common behaviour shared by both the OpenGL and raster backends."""

    def _init_view_widget(self) -> None:
        self.setAttribute(QtCore.Qt.WA_AcceptTouchEvents, True)
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent, False)
        self.setMouseTracking(True)
        self.setAutoFillBackground(False)
        self.engine = GardenEngine(on_select=self._emit_selected, on_move=self._emit_moved)
        self._transparent = False
        self._background = QtGui.QColor("#0A0C12")
        self._timer = QtCore.QTimer(self)
        self._frame_interval_ms = 16
        self._timer.timeout.connect(self._on_frame)
        self._timer.start(self._frame_interval_ms)
        self._torn_down = False
        self.engine.resize(self.width(), self.height())

    def _apply_frame_interval(self, interval_ms: int) -> None:
        """Update the refresh interval used by the frame timer."""

        interval_ms = max(int(interval_ms), 0)
        if interval_ms == self._frame_interval_ms and self._timer.isActive() == (interval_ms > 0):
            return
        self._frame_interval_ms = interval_ms
        if interval_ms <= 0 or self._torn_down:
            if self._timer.isActive():
                self._timer.stop()
            return
        if self._timer.isActive():
            self._timer.setInterval(interval_ms)
        else:
            self._timer.start(interval_ms)

    # ------------------------------------------------------------------ API
    def set_trees(self, trees: Iterable[TreeLike]) -> None:
        self.engine.set_trees(trees)

    def set_water_event(self, event_id: int) -> None:
        self.engine.set_water_event(event_id)

    def set_params(self, payload: Mapping[str, object]) -> None:
        self.engine.set_params(payload)
        system = self.engine.state.get("system", {})
        if not isinstance(system, Mapping):
            system = {}
        interval = system.get("frameIntervalMs")
        try:
            target_interval = int(float(interval)) if interval is not None else 16
        except (TypeError, ValueError):
            target_interval = 16
        self._apply_frame_interval(target_interval)
        background = system.get("background")
        if background is not None:
            self._background = _qcolor(parse_color(background, (10, 12, 18, 1.0)))
        transparent = bool(system.get("transparent", False))
        if transparent != self._transparent:
            self.set_transparent(transparent)
        self.update()

    def set_transparent(self, enabled: bool) -> None:
        self._transparent = bool(enabled)
        self.setAttribute(QtCore.Qt.WA_NoSystemBackground, self._transparent)
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground, self._transparent)
        self.update()

    def reset_visual_state(self) -> None:
        self.engine.reset_visual_state()
        self.update()

    def teardown(self) -> None:
        """Stop the frame timer and drop any gesture in flight."""

        if self._torn_down:
            return
        self._torn_down = True
        self._timer.stop()
        try:
            self._timer.timeout.disconnect(self._on_frame)
        except TypeError:
            pass
        self.engine.gestures.cancel()
        logger.debug("Garden view torn down after %d frames", self.engine.frame_count)

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    # ------------------------------------------------------------------ frames
    def _on_frame(self) -> None:
        if not self.engine.has_surface:
            return
        self.engine.advance()
        self.update()

    def _emit_selected(self, tree: Tree) -> None:
        self.treeSelected.emit(tree)

    def _emit_moved(self, tree_id: str, x: float) -> None:
        self.treeMoved.emit(tree_id, float(x))

    def _sync_surface(self) -> None:
        self.engine.resize(self.width(), self.height())
        self.update()

    # ------------------------------------------------------------------ input
    def _update_cursor(self, x: float, y: float) -> None:
        if self.engine.gestures.state is not GestureState.IDLE:
            self.setCursor(QtCore.Qt.ClosedHandCursor)
        elif self.engine.hover(x, y):
            self.setCursor(QtCore.Qt.OpenHandCursor)
        else:
            self.unsetCursor()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.button() != QtCore.Qt.LeftButton:
            return super().mousePressEvent(event)
        pos = event.localPos()
        if self.engine.press(pos.x(), pos.y(), InputKind.POINTER):
            self.setCursor(QtCore.Qt.ClosedHandCursor)
        event.accept()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        pos = event.localPos()
        if self.engine.gestures.state is not GestureState.IDLE:
            self.engine.drag(pos.x(), pos.y())
        else:
            self._update_cursor(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.button() != QtCore.Qt.LeftButton:
            return super().mouseReleaseEvent(event)
        pos = event.localPos()
        self.engine.release(pos.x(), pos.y())
        self._update_cursor(pos.x(), pos.y())
        event.accept()

    def _handle_touch(self, event: QtGui.QTouchEvent) -> bool:
        points = event.touchPoints()
        kind = event.type()
        if kind == QtCore.QEvent.TouchCancel:
            self.engine.gestures.cancel()
            return True
        if not points:
            return True
        pos = points[0].pos()
        if kind == QtCore.QEvent.TouchBegin:
            self.engine.press(pos.x(), pos.y(), InputKind.TOUCH)
        elif kind == QtCore.QEvent.TouchUpdate:
            self.engine.drag(pos.x(), pos.y())
        elif kind == QtCore.QEvent.TouchEnd:
            self.engine.release(pos.x(), pos.y())
        return True

    def event(self, event: QtCore.QEvent) -> bool:  # type: ignore[override]
        if event.type() in (
            QtCore.QEvent.TouchBegin,
            QtCore.QEvent.TouchUpdate,
            QtCore.QEvent.TouchEnd,
            QtCore.QEvent.TouchCancel,
        ):
            event.accept()
            return self._handle_touch(event)
        return super().event(event)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self.teardown()
        super().closeEvent(event)

    # ------------------------------------------------------------------ painting
    def _render_with_painter(self, painter: QtGui.QPainter) -> None:
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
        if self._transparent:
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_Source)
            painter.fillRect(self.rect(), QtCore.Qt.transparent)
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_SourceOver)
        else:
            painter.fillRect(self.rect(), self._background)

        frame = self.engine.build_frame(self.width(), self.height())
        if frame.is_empty:
            return
        for geometry in frame.trees:
            self._draw_tree(painter, geometry)
        self._draw_dots(painter, frame.canopy, frame.canopy_color, frame.canopy_blur)
        self._draw_dots(painter, frame.splash, frame.splash_color, frame.splash_blur)

    def _stroke_path(self, stroke: Stroke) -> QtGui.QPainterPath:
        path = QtGui.QPainterPath(QtCore.QPointF(*stroke.start))
        if stroke.control is not None:
            path.quadTo(QtCore.QPointF(*stroke.control), QtCore.QPointF(*stroke.end))
        else:
            path.lineTo(QtCore.QPointF(*stroke.end))
        return path

    def _draw_tree(self, painter: QtGui.QPainter, geometry: TreeGeometry) -> None:
        painter.setBrush(QtCore.Qt.NoBrush)
        paths = [(stroke, self._stroke_path(stroke)) for stroke in geometry.strokes]
        if geometry.glow is not None:
            for stroke, path in paths:
                pen = QtGui.QPen(_qcolor(geometry.glow, 0.35), stroke.width + geometry.glow_blur * 0.5)
                pen.setCapStyle(QtCore.Qt.RoundCap)
                painter.setPen(pen)
                painter.drawPath(path)
        for stroke, path in paths:
            pen = QtGui.QPen(_qcolor(stroke.color), stroke.width)
            pen.setCapStyle(QtCore.Qt.RoundCap)
            painter.setPen(pen)
            painter.drawPath(path)
        painter.setPen(QtCore.Qt.NoPen)
        for blossom in geometry.blossoms:
            self._draw_blossom(painter, blossom)

    def _draw_blossom(self, painter: QtGui.QPainter, blossom: Blossom) -> None:
        cx, cy = blossom.center
        size = blossom.size
        center = QtCore.QPointF(cx, cy)
        halo = size + blossom.blur
        painter.setBrush(_glow_brush(center, halo, blossom.shadow))
        painter.drawEllipse(center, halo, halo)

        painter.setBrush(_qcolor(blossom.color))
        if blossom.shape is BlossomShape.SQUARE:
            painter.drawRect(QtCore.QRectF(cx - size, cy - size, size * 2.0, size * 2.0))
        elif blossom.shape is BlossomShape.FLOWER:
            for i in range(5):
                a = (i / 5.0) * math.pi * 2.0
                petal = QtCore.QPointF(cx + math.cos(a) * size * 1.5, cy + math.sin(a) * size * 1.5)
                painter.drawEllipse(petal, size, size)
        else:
            painter.drawEllipse(center, size, size)

    def _draw_dots(self, painter: QtGui.QPainter, dots: Iterable[Dot], color: RGBA, blur: float) -> None:
        painter.setPen(QtCore.Qt.NoPen)
        for dot in dots:
            if dot.alpha <= 0.0:
                continue
            center = QtCore.QPointF(dot.x, dot.y)
            if blur > 0.0:
                painter.setBrush(_glow_brush(center, dot.size + blur * 0.5, color, dot.alpha))
                painter.drawEllipse(center, dot.size + blur * 0.5, dot.size + blur * 0.5)
            painter.setBrush(_qcolor(color, dot.alpha))
            painter.drawEllipse(center, dot.size, dot.size)


class _OpenGLViewWidget(_ViewWidgetBase, QtWidgets.QOpenGLWidget):
    """OpenGL-backed renderer when the system can create a GL context."""

    treeSelected = QtCore.pyqtSignal(object)
    treeMoved = QtCore.pyqtSignal(str, float)

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        QtWidgets.QOpenGLWidget.__init__(self, parent)
        self._init_view_widget()

    def paintGL(self) -> None:  # pragma: no cover - requires GUI context
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._sync_surface()


class _RasterViewWidget(_ViewWidgetBase, QtWidgets.QWidget):
    """Fallback renderer using the traditional raster ``QWidget`` backend."""

    treeSelected = QtCore.pyqtSignal(object)
    treeMoved = QtCore.pyqtSignal(str, float)

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        QtWidgets.QWidget.__init__(self, parent)
        self._init_view_widget()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        del event
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._sync_surface()


def _should_use_opengl(force_backend: Optional[str]) -> bool:
    if force_backend == "raster":
        return False
    if force_backend == "opengl":
        return True

    env_backend = os.environ.get("GARDEN_FORCE_BACKEND", "").strip().lower()
    if env_backend == "raster":
        return False
    if env_backend == "opengl":
        return True
    if os.environ.get("QT_QPA_PLATFORM", "").strip().lower() in {"offscreen", "minimal"}:
        return False
    return hasattr(QtWidgets, "QOpenGLWidget")


def GardenViewWidget(
    parent: Optional[QtWidgets.QWidget] = None,
    *,
    force_backend: Optional[str] = None,
) -> QtWidgets.QWidget:
    """Factory returning the best available garden widget.

    Parameters
    ----------
    parent:
        Parent widget used by Qt for ownership.
    force_backend:
        ``"opengl"`` forces the OpenGL widget while ``"raster"`` selects the
        plain QWidget implementation.  Defaults to the ``GARDEN_FORCE_BACKEND``
        environment variable, then to OpenGL when available.
    """

    if _should_use_opengl(force_backend):
        try:
            widget = _OpenGLViewWidget(parent)
            setattr(widget, "backend_name", "opengl")
            return widget
        except Exception as exc:
            logger.warning("Unable to initialise OpenGL backend (%r). Using raster widget instead.", exc)
    widget = _RasterViewWidget(parent)
    setattr(widget, "backend_name", "raster")
    return widget

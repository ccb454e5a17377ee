from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Literal, Mapping

from sdui_core.actions import resolve_action
from sdui_core.config import DEFAULT_CONFIG, BuilderConfig
from sdui_core.schema import (
    ButtonProps,
    Component,
    DatePickerProps,
    HeadingProps,
    ImageProps,
    SpacerProps,
    TextareaProps,
    TextInputProps,
    TextProps,
)

from .nodes import VisualNode
from .style.resolver import resolve_style
from .style.theme import ThemeTokens, theme_from_config

LOGGER = logging.getLogger(__name__)

ButtonVariant = Literal["primary", "secondary", "outline"]
ActionCallback = Callable[[str], None]
FormDataCallback = Callable[[str, str], None]

FIELD_BORDER_COLOR = "#E0E0E0"
TEXT_COLOR = "#000000"


@dataclass(frozen=True)
class RenderContext:
    """Per-render inputs shared by every component renderer."""

    theme: ThemeTokens
    config: BuilderConfig = DEFAULT_CONFIG
    form_data: Mapping[str, str] | None = None
    on_form_data_change: FormDataCallback | None = None
    on_action: ActionCallback | None = None

    def value_for(self, component_id: str) -> str:
        if not self.form_data:
            return ""
        return str(self.form_data.get(component_id) or "")


def render_component(
    component: Component,
    *,
    form_data: Mapping[str, str] | None = None,
    on_form_data_change: FormDataCallback | None = None,
    on_action: ActionCallback | None = None,
    theme: ThemeTokens | None = None,
    config: BuilderConfig = DEFAULT_CONFIG,
) -> VisualNode:
    ctx = RenderContext(
        theme=theme or theme_from_config(config),
        config=config,
        form_data=form_data,
        on_form_data_change=on_form_data_change,
        on_action=on_action,
    )
    return ComponentRenderer(ctx).render(component)


class ComponentRenderer:
    """Maps one schema component to a visual node by its `type`."""

    def __init__(self, ctx: RenderContext) -> None:
        self.ctx = ctx
        self._renderers: dict[str, Callable[[Component], VisualNode]] = {
            "text": self._render_text,
            "heading": self._render_heading,
            "button": self._render_button,
            "text-input": self._render_field,
            "textarea": self._render_field,
            "date-picker": self._render_field,
            "image": self._render_image,
            "spacer": self._render_spacer,
        }

    def render(self, component: Component) -> VisualNode:
        renderer = self._renderers.get(component.type)
        if renderer is None:
            LOGGER.warning("component %s has unsupported type `%s`", component.id, component.type)
            return VisualNode(
                kind="unsupported",
                node_id=component.id,
                text=f"Unsupported component: {component.type}",
                style={"color": self.ctx.theme.destructive},
                attrs={"type": component.type},
            )
        return renderer(component)

    def _render_text(self, component: Component) -> VisualNode:
        props = component.typed_props()
        assert isinstance(props, TextProps)
        style: dict[str, Any] = {
            "fontSize": 16,
            "fontWeight": "normal",
            "color": TEXT_COLOR,
            "textAlign": "left",
            "lineHeight": 1.4,
        }
        style.update(resolve_style(props.style))
        return VisualNode(kind="text", node_id=component.id, text=props.text, style=style, attrs=dict(props.extra))

    def _render_heading(self, component: Component) -> VisualNode:
        props = component.typed_props()
        assert isinstance(props, HeadingProps)
        style: dict[str, Any] = {
            "fontSize": 24,
            "fontWeight": "bold",
            "color": TEXT_COLOR,
            "textAlign": "left",
            "lineHeight": 1.2,
            "margin": 0,
        }
        style.update(resolve_style(props.style))
        attrs = {"level": 2, **props.extra}
        return VisualNode(kind="heading", node_id=component.id, text=props.text, style=style, attrs=attrs)

    def _render_button(self, component: Component) -> VisualNode:
        props = component.typed_props()
        assert isinstance(props, ButtonProps)
        variant = self._variant(props.variant)
        theme = self.ctx.theme
        background = {"primary": theme.primary, "secondary": theme.secondary, "outline": "transparent"}[variant]
        border = theme.secondary if variant == "secondary" else theme.primary
        label_color = theme.primary if variant == "outline" else "#FFFFFF"
        style: dict[str, Any] = {
            "flexDirection": "row",
            "alignItems": "center",
            "justifyContent": "center",
            "padding": "12px 16px",
            "borderRadius": 8,
            "minWidth": 44,
            "minHeight": 44,
            "borderWidth": 1,
            "borderStyle": "solid",
            "borderColor": border,
            "backgroundColor": background,
        }
        style.update(resolve_style(props.style))
        label = VisualNode(
            kind="label",
            node_id=f"{component.id}__label",
            text=props.title,
            style={"color": label_color, "fontSize": 16, "fontWeight": "600", "textAlign": "center"},
        )
        attrs: dict[str, Any] = {"variant": variant, **props.extra}
        token = resolve_action(component.action)
        if token is not None:
            attrs["action"] = token
        return VisualNode(
            kind="button",
            node_id=component.id,
            style=style,
            attrs=attrs,
            children=(label,),
            on_click=self._click_handler(component),
        )

    def _render_field(self, component: Component) -> VisualNode:
        props = component.typed_props()
        assert isinstance(props, (TextInputProps, TextareaProps, DatePickerProps))
        input_style: dict[str, Any] = {
            "width": "100%",
            "padding": 12,
            "fontSize": 16,
            "borderWidth": 1,
            "borderStyle": "solid",
            "borderColor": FIELD_BORDER_COLOR,
            "borderRadius": 8,
            "backgroundColor": "#FFFFFF",
        }
        input_style.update(resolve_style(props.style))
        attrs: dict[str, Any] = {"value": self.ctx.value_for(component.id)}
        if props.placeholder is not None:
            attrs["placeholder"] = props.placeholder
        if isinstance(props, TextInputProps):
            attrs.update(inputType="text", keyboardType=props.keyboard_type, autoCapitalize=props.auto_capitalize)
        elif isinstance(props, TextareaProps):
            attrs.update(rows=props.rows, autoCapitalize=props.auto_capitalize)
            input_style["resize"] = "vertical"
        else:
            attrs["inputType"] = "date"
        attrs.update(props.extra)
        if component.validation is not None:
            attrs["validation"] = component.validation.to_dict()

        children: list[VisualNode] = []
        if props.label:
            children.append(
                VisualNode(
                    kind="label",
                    node_id=f"{component.id}__label",
                    text=props.label,
                    style={"display": "block", "marginBottom": 8, "fontSize": 14, "fontWeight": "600", "color": TEXT_COLOR},
                )
            )
        children.append(
            VisualNode(
                kind=component.type,
                node_id=component.id,
                style=input_style,
                attrs=attrs,
                on_change=self._change_handler(component.id),
            )
        )
        return VisualNode(
            kind="field",
            node_id=f"{component.id}__field",
            style={"marginBottom": 16, "width": "100%"},
            children=tuple(children),
        )

    def _render_image(self, component: Component) -> VisualNode:
        props = component.typed_props()
        assert isinstance(props, ImageProps)
        style: dict[str, Any] = {
            "width": "100%",
            "height": self.ctx.config.image_height_px,
            "objectFit": "cover",
            "borderRadius": 8,
            "margin": 0,
            "padding": 0,
        }
        style.update(resolve_style(props.style))
        attrs: dict[str, Any] = {"source": props.source or "", "alt": ""}
        attrs.update(props.extra)
        return VisualNode(kind="image", node_id=component.id, style=style, attrs=attrs)

    def _render_spacer(self, component: Component) -> VisualNode:
        props = component.typed_props()
        assert isinstance(props, SpacerProps)
        return VisualNode(kind="spacer", node_id=component.id, style={"width": "100%", "height": props.size})

    def _variant(self, raw: str) -> ButtonVariant:
        if raw in ("primary", "secondary", "outline"):
            return raw  # type: ignore[return-value]
        LOGGER.debug("unknown button variant `%s`; using primary", raw)
        return "primary"

    def _click_handler(self, component: Component) -> Callable[[], None] | None:
        if component.action is None or self.ctx.on_action is None:
            return None
        on_action = self.ctx.on_action
        action = component.action

        def _click() -> None:
            token = resolve_action(action)
            if token is None:
                LOGGER.debug("button %s has an inert action", component.id)
                return
            on_action(token)

        return _click

    def _change_handler(self, component_id: str) -> Callable[[str], None] | None:
        if self.ctx.on_form_data_change is None:
            return None
        callback = self.ctx.on_form_data_change

        def _change(value: str) -> None:
            callback(component_id, value)

        return _change

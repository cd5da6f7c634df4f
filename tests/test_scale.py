from display_switcher.scale import ScaledMetrics, layout_for, scale


def test_low_reference() -> None:
    assert scale(486) == ScaledMetrics(margin_top=50, icon_size=25, font_size=15)


def test_high_reference() -> None:
    assert scale(1200) == ScaledMetrics(margin_top=150, icon_size=55, font_size=30)


def test_clamps_outside_reference_range() -> None:
    assert scale(3000) == scale(1200)
    assert scale(100) == scale(486)
    assert scale(-5) == scale(486)


def test_halfway_rounds_half_up() -> None:
    # t == 0.5: font size 22.5 must become 23, not banker's 22
    assert scale(843) == ScaledMetrics(margin_top=100, icon_size=40, font_size=23)


def test_common_heights() -> None:
    assert scale(1080) == ScaledMetrics(margin_top=133, icon_size=50, font_size=27)
    assert scale(768) == ScaledMetrics(margin_top=89, icon_size=37, font_size=21)


def test_css_pixels() -> None:
    assert scale(486).css() == {"margin-top": "50px", "icon-size": "25px", "font-size": "15px"}


def test_layout_for_keeps_monitor_size() -> None:
    layout = layout_for(1920, 1200)
    assert (layout.monitor_width, layout.monitor_height) == (1920, 1200)
    assert layout.metrics == scale(1200)

from checkin_alarm.overlay import OverlayPresenter


def test_second_display_is_refused_while_visible(qapp):
    presenter = OverlayPresenter()
    assert presenter.display("first") is True
    first_window = presenter.window
    assert presenter.is_active

    assert presenter.display("second") is False
    assert presenter.window is first_window
    assert first_window.label.text() == "first"
    presenter.dismiss()


def test_closing_overlay_clears_active_flag(qapp):
    presenter = OverlayPresenter()
    presenter.display("check in")
    presenter.window.close()
    assert not presenter.is_active
    assert presenter.window is None


def test_dismiss_then_display_again(qapp):
    presenter = OverlayPresenter()
    presenter.display("one")
    presenter.dismiss()
    assert presenter.display("two") is True
    assert presenter.window.label.text() == "two"
    presenter.dismiss()
    assert not presenter.is_active


def test_dismiss_without_overlay_is_noop(qapp):
    presenter = OverlayPresenter()
    presenter.dismiss()
    assert not presenter.is_active

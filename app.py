"""
Charik Toz Hesaplayıcı Streamlit uygulaması
Charik sayısından Alt/Üst Toz dağılımını hesaplar; herhangi bir alan düzenlenince charik sayısını geri çözer.
"""
import math
import streamlit as st

from toz_calc import TOZ_KINDS, COMPONENT_KEYS
from toz_state import (
    initial_state, reset_state, apply_charik_count, apply_toz_edit,
    implied_charik_count, parse_edit_value,
)
from toz_table import FIELD_LABELS, format_value, state_to_dataframe, dataframe_to_csv_bytes
from config_manager import load_app_settings_safe, save_app_settings, DEFAULT_APP_SETTINGS, MAX_DECIMALS
from error_display_util import format_error_display

# Sayfa ayarı
st.set_page_config(
    page_title="Charik Toz Hesaplayıcı",
    page_icon="🧮",
    layout="wide"
)

# Oturum durumunun başlatılması
if 'app_settings' not in st.session_state:
    settings, settings_error = load_app_settings_safe(st.secrets)
    if settings_error is not None:
        st.error(format_error_display(settings_error, "Ayarları yükleme"))
    st.session_state.app_settings = settings
if 'calculator_state' not in st.session_state:
    st.session_state.calculator_state = initial_state(
        st.session_state.app_settings.get("initial_charik_count", DEFAULT_APP_SETTINGS["initial_charik_count"])
    )


def _decimals() -> int:
    return st.session_state.app_settings.get("decimals", DEFAULT_APP_SETTINGS["decimals"])


def _current_value(target: tuple) -> float:
    state = st.session_state.calculator_state
    if target[0] == "charik":
        return state.charik_count
    kind_key, field_key = target
    return state.toz(kind_key).get(field_key)


def _target_label(target: tuple) -> str:
    if target[0] == "charik":
        return "Charik Sayısı"
    kind_key, field_key = target
    return f"{TOZ_KINDS[kind_key].label} {FIELD_LABELS[field_key]}"


def _confirm_edit(target: tuple, text: str):
    value = parse_edit_value(text)
    state = st.session_state.calculator_state
    if target[0] == "charik":
        st.session_state.calculator_state = apply_charik_count(value)
    else:
        kind_key, field_key = target
        st.session_state.calculator_state = apply_toz_edit(
            state, kind_key, field_key, value,
            propagate=st.session_state.app_settings.get("propagate_edits", True),
        )


def open_edit_dialog(target: tuple):
    """Tek bir değeri düzenlemek için modal. Enter veya Onayla ile onaylanır."""
    label = _target_label(target)

    @st.dialog(f"Değer Düzenle: {label}")
    def _dialog():
        initial = format_value(_current_value(target), _decimals())
        with st.form(f"edit_form_{'_'.join(target)}"):
            text = st.text_input(label, value=initial)
            submitted = st.form_submit_button("Onayla", type="primary", width="stretch")
        if submitted:
            try:
                _confirm_edit(target, text)
            except Exception as e:
                st.error(format_error_display(e, "Değer güncelleme"))
                return
            st.rerun()
        if st.button("İptal", width="stretch"):
            st.rerun()

    _dialog()


def render_field(target: tuple, label: str, value: float, emphasize: bool = False):
    col1, col2, col3 = st.columns([3, 3, 1])
    with col1:
        st.markdown(f"**{label}**" if emphasize else label)
    with col2:
        shown = format_value(value, _decimals())
        st.markdown(f"### {shown}" if emphasize else f"`{shown}`")
    with col3:
        if st.button("✏️", key=f"edit_{'_'.join(target)}", help=f"{label} düzenle"):
            open_edit_dialog(target)


with st.sidebar:
    st.header("⚙️ Ayarlar")
    settings = st.session_state.app_settings
    decimals = st.number_input("Ondalık basamak", min_value=0, max_value=MAX_DECIMALS,
                               value=int(settings.get("decimals", 2)), step=1)
    propagate = st.toggle("Düzenleme diğer tozu da güncellesin", value=bool(settings.get("propagate_edits", True)),
                          help="Kapalıyken bir tozda yapılan düzenleme yalnızca charik sayısını ve o tozu değiştirir.")
    st.session_state.app_settings = {**settings, "decimals": int(decimals), "propagate_edits": bool(propagate)}
    if st.button("💾 Ayarları kaydet", width="stretch"):
        try:
            saved = save_app_settings(st.session_state.app_settings)
            st.session_state.app_settings = {**st.session_state.app_settings, **saved}
            st.success("✅ Ayarlar kaydedildi")
        except Exception as e:
            st.error(format_error_display(e, "Ayarları kaydetme"))
    st.markdown("---")
    if st.button("🔄 Sıfırla", width="stretch", type="primary"):
        st.session_state.calculator_state = reset_state()
        st.rerun()
    st.markdown("---")
    st.markdown("### 📋 Kullanım")
    st.markdown("1. Charik sayısını girin 2. Alt/Üst Toz değerleri hesaplanır 3. Herhangi bir değeri düzenleyince charik sayısı geri hesaplanır")

st.title("🧮 Charik Toz Hesaplayıcı")
state = st.session_state.calculator_state

render_field(("charik",), "Charik Sayısı", state.charik_count, emphasize=True)
st.divider()

columns = st.columns(len(TOZ_KINDS))
for col, kind in zip(columns, TOZ_KINDS.values()):
    with col:
        st.subheader(f"{kind.label} ({kind.total_per_charik} / charik)")
        toz = state.toz(kind.key)
        for key in COMPONENT_KEYS:
            render_field((kind.key, key), f"{FIELD_LABELS[key]} (%{kind.weights[key] * 100:g})", toz.get(key))
        render_field((kind.key, "total"), FIELD_LABELS["total"], toz.total, emphasize=True)
        implied = implied_charik_count(toz, kind)
        if not math.isclose(implied, state.charik_count, rel_tol=1e-9, abs_tol=1e-9):
            st.caption(f"ℹ️ Bu değerler {format_value(implied, _decimals())} charik'e karşılık gelir "
                       f"(saklanan charik sayısı {format_value(state.charik_count, _decimals())}).")

st.markdown("---")
st.subheader("📊 Özet Tablo")
df = state_to_dataframe(state, _decimals())
st.dataframe(df, width="stretch", hide_index=True)
st.download_button("📥 CSV olarak indir", data=dataframe_to_csv_bytes(df),
                   file_name="charik_toz.csv", mime="text/csv", key="csv_toz_btn")

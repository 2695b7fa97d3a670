"""
Export Excel des bilans pédagogiques et financiers
"""
from io import BytesIO
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

SECTION_LABELS = {
    'identification': 'Identification de l\'organisme',
    'training': 'Activité de formation',
    'financial': 'Bilan financier',
    'trainers': 'Personnes dispensant des heures de formation',
    'trainees': 'Stagiaires',
}


def flatten_bpf_data(data, prefix=''):
    """
    Aplatit le contenu JSON du BPF en lignes (rubrique, valeur).
    Les rubriques imbriquées sont jointes par un point.
    """
    rows = []
    for key, value in data.items():
        label = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            rows.extend(flatten_bpf_data(value, label))
        elif isinstance(value, (list, tuple)):
            rows.append((label, ', '.join(str(item) for item in value)))
        else:
            rows.append((label, value))
    return rows


def export_bpf_to_excel(bpf, organization_name=''):
    """
    Construit le classeur Excel d'un BPF

    Structure de la feuille:
    - Ligne 1: titre (organisme et exercice)
    - Ligne 2: statut et informations de transmission
    - Ligne 4: en-têtes Section / Rubrique / Valeur
    - Lignes suivantes: une ligne par rubrique du formulaire
    """
    wb = Workbook()
    ws = wb.active
    ws.title = f"BPF {bpf.year}"

    header_font = Font(name='Calibri', size=11, bold=True, color='FFFFFF')
    header_fill = PatternFill(start_color='2F5496', end_color='2F5496', fill_type='solid')
    header_alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
    section_fill = PatternFill(start_color='D9E1F2', end_color='D9E1F2', fill_type='solid')
    cell_alignment = Alignment(horizontal='left', vertical='top', wrap_text=True)

    thin_border = Border(
        left=Side(style='thin', color='000000'),
        right=Side(style='thin', color='000000'),
        top=Side(style='thin', color='000000'),
        bottom=Side(style='thin', color='000000')
    )

    ws.merge_cells('A1:C1')
    title_cell = ws['A1']
    title_cell.value = f"Bilan pédagogique et financier {bpf.year} - {organization_name or 'Organisme'}"
    title_cell.font = Font(name='Calibri', size=14, bold=True, color='FFFFFF')
    title_cell.fill = PatternFill(start_color='1F4E78', end_color='1F4E78', fill_type='solid')
    title_cell.alignment = Alignment(horizontal='center', vertical='center')
    ws.row_dimensions[1].height = 25

    ws.merge_cells('A2:C2')
    info_cell = ws['A2']
    info = f"Statut: {bpf.get_status_display()}"
    if bpf.submitted_date:
        info += f" | Transmis le {bpf.submitted_date:%d/%m/%Y} à {bpf.submitted_to} ({bpf.submission_method})"
    info_cell.value = info
    info_cell.font = Font(name='Calibri', size=10, italic=True)
    info_cell.alignment = Alignment(horizontal='center', vertical='center')

    for cell_ref, text in (('A4', 'SECTION'), ('B4', 'RUBRIQUE'), ('C4', 'VALEUR')):
        cell = ws[cell_ref]
        cell.value = text
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = header_alignment
        cell.border = thin_border

    for col, width in {'A': 35, 'B': 45, 'C': 25}.items():
        ws.column_dimensions[col].width = width

    current_row = 5
    rows = flatten_bpf_data(bpf.data or {})

    for label, value in rows:
        section, _, field = label.partition('.')
        cell = ws[f'A{current_row}']
        cell.value = SECTION_LABELS.get(section, section) if field else ''
        cell.fill = section_fill
        cell.border = thin_border
        cell.alignment = cell_alignment

        cell = ws[f'B{current_row}']
        cell.value = field or section
        cell.border = thin_border
        cell.alignment = cell_alignment

        cell = ws[f'C{current_row}']
        cell.value = value if value not in (None, '') else '-'
        cell.border = thin_border
        cell.alignment = Alignment(horizontal='right', vertical='top')

        current_row += 1

    if not rows:
        ws.merge_cells('A5:C5')
        cell = ws['A5']
        cell.value = "Aucune donnée saisie pour ce BPF"
        cell.font = Font(name='Calibri', size=11, italic=True, color='999999')
        cell.alignment = Alignment(horizontal='center', vertical='center')

    return wb


def render_bpf_excel(bpf, organization_name=''):
    """Retourne le contenu binaire du classeur (.xlsx)"""
    wb = export_bpf_to_excel(bpf, organization_name)
    buffer = BytesIO()
    wb.save(buffer)
    logger.info(f"Export Excel généré pour {bpf} ({len(buffer.getvalue())} octets)")
    return buffer.getvalue()

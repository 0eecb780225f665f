"""
ROI Navigator - Excel Export
Renders inputs and computed outputs into a styled workbook. This is the only
place figures are rounded for display.
"""
import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

from engines.reference import VALUE_STREAM_KEYS, VALUE_STREAM_LABELS, SCENARIOS

SHEETS = ('Executive Summary', 'Baseline', 'Value Streams', 'Timeline', 'Scenarios',
          'Sensitivity', 'Do Nothing', 'Channel ROAS')

HEADER_FONT = Font(bold=True, color='FFFFFF', size=11)
HEADER_FILL = PatternFill(start_color='2E2E38', end_color='2E2E38', fill_type='solid')
THIN = Side(style='thin')
BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)


def ws_write(ws, headers, rows):
    for c, h in enumerate(headers, 1):
        cell = ws.cell(row=1, column=c, value=h)
        cell.font = HEADER_FONT; cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center'); cell.border = BORDER
    for r, row in enumerate(rows, 2):
        for c, val in enumerate(row, 1):
            ws.cell(row=r, column=c, value=val).border = BORDER
    for col in ws.columns:
        ml = max(len(str(cell.value or '')) for cell in col)
        ws.column_dimensions[col[0].column_letter].width = min(ml + 2, 40)


def _money(v):
    return f"${v:,.0f}"


def _pct(v, digits=1):
    return 'n/a' if v is None else f"{v:.{digits}f}%"


def _months(v):
    return 'Beyond horizon' if v is None else v


def build_workbook(inputs, baseline, outputs, sensitivity):
    """One sheet per output section, in SHEETS order."""
    wb = openpyxl.Workbook()
    org = inputs.get('org', {})
    inv = inputs.get('investment', {})

    # 1. Executive Summary
    ws = wb.active; ws.title = SHEETS[0]
    ws_write(ws, ['Metric', 'Value'], [
        ['Company', org.get('companyName') or ''],
        ['Industry', org.get('industry', '')],
        ['Total Investment', _money(outputs['totalInvestment'])],
        ['Implementation', f"{inv.get('implementationWeeks', 0)} weeks"],
        ['Annual OpEx', _money(outputs['annualOpEx'])],
        ['Total Annual Value', _money(outputs['totalAnnualValue'])],
        ['3-Year ROI', _pct(outputs['threeYearRoi'])],
        ['Payback (months)', _months(outputs['paybackMonths'])],
        ['NPV', _money(outputs['netPresentValue'])],
        ['IRR', _pct(outputs['irr'])],
        ['Meets Hurdle', 'Yes' if outputs['meetsHurdle'] else 'No'],
        ['Disabled Streams', ', '.join(VALUE_STREAM_LABELS[k] for k in outputs['disabledStreams']) or 'None'],
    ])

    # 2. Baseline
    ws2 = wb.create_sheet(SHEETS[1])
    ws_write(ws2, ['Cost Bucket', 'Annual Cost', 'In Total'], [
        ['Team Salaries', round(baseline['annualTeamCost']), 'Yes'],
        ['Martech Waste', round(baseline['annualMartechWaste']), 'Yes'],
        ['Media Waste', round(baseline['annualMediaWaste']), 'Yes'],
        ['Attribution Waste', round(baseline['annualAttributionWaste']), 'Yes'],
        ['Total Annual Cost', round(baseline['totalAnnualCost']), ''],
        ['Agency Spend', round(baseline['annualAgencyCost']), 'No'],
        ['Rework', round(baseline['annualReworkCost']), 'No'],
        ['Admin Overhead', round(baseline['annualAdminOverheadCost']), 'No'],
        ['Approval Bottleneck', round(baseline['annualApprovalBottleneckCost']), 'No'],
    ])

    # 3. Value Streams
    ws3 = wb.create_sheet(SHEETS[2])
    disabled = set(outputs['disabledStreams'])
    ws_write(ws3, ['Stream', 'Annual Value', 'Enabled'], [
        [VALUE_STREAM_LABELS[k], round(outputs['valueStreams'][k]), 'No' if k in disabled else 'Yes']
        for k in VALUE_STREAM_KEYS
    ])

    # 4. Timeline
    ws4 = wb.create_sheet(SHEETS[3])
    ws_write(ws4, ['Month', 'Phase', 'Cum. Investment', 'Conservative', 'Expected', 'Aggressive', 'Net (Expected)'], [
        [t['month'], t['phase'], round(t['investmentCumulative']), round(t['valueConservative']),
         round(t['valueExpected']), round(t['valueAggressive']), round(t['netExpected'])]
        for t in outputs['timeline']
    ])

    # 5. Scenarios
    ws5 = wb.create_sheet(SHEETS[4])
    ws_write(ws5, ['Scenario', 'Multiplier', 'Annual Value', 'NPV', 'IRR', 'Payback', '3-Year ROI'], [
        [s['label'], s['multiplier'], round(s['annualValue']), round(s['netPresentValue']),
         _pct(s['irr']), _months(s['paybackMonths']), _pct(s['threeYearRoi'])]
        for s in (outputs['scenarios'][name] for name in SCENARIOS)
    ])

    # 6. Sensitivity
    ws6 = wb.create_sheet(SHEETS[5])
    header = [f"{sensitivity['rowLabel']} \\ {sensitivity['colLabel']}"] + sensitivity['colValues']
    ws_write(ws6, header, [
        [label] + [_months(v) for v in row]
        for label, row in zip(sensitivity['rowValues'], sensitivity['paybacks'])
    ])

    # 7. Do Nothing
    ws7 = wb.create_sheet(SHEETS[6])
    dn = outputs['doNothing']
    ws_write(ws7, ['Quarter', 'Cumulative Loss', 'Erosion %'], [
        [q + 1, round(loss), _pct(pct, 2)]
        for q, (loss, pct) in enumerate(zip(dn['quarterlyLosses'], dn['quarterlyErosionPcts']))
    ])

    # 8. Channel ROAS
    ws8 = wb.create_sheet(SHEETS[7])
    ws_write(ws8, ['Channel', 'Current ROAS', 'AI-Optimized ROAS', 'Lift %'], [
        [c['channel'], c['currentRoas'], round(c['aiOptimizedRoas'], 2), c['liftPct']]
        for c in outputs['channelRoas']
    ])
    return wb

from datetime import date, timedelta
from types import SimpleNamespace

from django.test import SimpleTestCase, override_settings

from apps.bookings.projection import (
    generate_operating_hour_slots,
    generate_time_slots,
    occurrences_for_date,
    parse_hhmm,
    project_weekly_template,
    sunday_based_weekday,
)
from apps.core.exceptions import ValidationError
from apps.core.tests.fixtures import MONDAY, SUNDAY, at


def template(day, start, end):
    return SimpleNamespace(day_of_week=day, start_time=start, end_time=end)


class WeekdayTests(SimpleTestCase):
    def test_sunday_is_zero_and_saturday_is_six(self):
        self.assertEqual(sunday_based_weekday(SUNDAY), 0)
        self.assertEqual(sunday_based_weekday(MONDAY), 1)
        self.assertEqual(sunday_based_weekday(SUNDAY + timedelta(days=6)), 6)

    def test_parse_hhmm_rejects_garbage(self):
        self.assertEqual(parse_hhmm('07:05').hour, 7)
        with self.assertRaises(ValueError):
            parse_hhmm('25:00')


class ProjectWeeklyTemplateTests(SimpleTestCase):
    def setUp(self):
        self.templates = [
            template(1, '18:00', '19:00'),
            template(1, '09:00', '10:00'),
            template(2, '09:00', '10:00'),
            template(0, '11:00', '12:00'),
        ]

    def test_only_matching_weekday_sorted_by_start(self):
        self.assertEqual(
            project_weekly_template(self.templates, MONDAY),
            [
                {'start_time': '09:00', 'end_time': '10:00'},
                {'start_time': '18:00', 'end_time': '19:00'},
            ],
        )

    def test_wednesday_template(self):
        templates = [template(3, '10:00', '11:00'), template(3, '08:00', '09:00'), template(4, '08:00', '09:00')]
        wednesday = MONDAY + timedelta(days=2)
        self.assertEqual(
            [s['start_time'] for s in project_weekly_template(templates, wednesday)],
            ['08:00', '10:00'],
        )
        self.assertEqual(project_weekly_template([templates[0]], MONDAY), [])

    def test_sunday_templates_project_onto_sunday(self):
        self.assertEqual(
            project_weekly_template(self.templates, SUNDAY),
            [{'start_time': '11:00', 'end_time': '12:00'}],
        )

    def test_no_match_is_empty(self):
        self.assertEqual(project_weekly_template(self.templates, SUNDAY + timedelta(days=3)), [])

    def test_occurrences_are_aware_instants(self):
        occurrences = occurrences_for_date(self.templates, MONDAY)
        self.assertEqual([o.start for o in occurrences], [at(MONDAY, '09:00'), at(MONDAY, '18:00')])
        self.assertEqual(occurrences[0].key, '09:00-10:00')

    @override_settings(TIME_ZONE='Europe/London')
    def test_projection_uses_local_offset_across_dst(self):
        # UK clocks go forward on 2030-03-31
        before, after = date(2030, 3, 24), date(2030, 3, 31)
        templates = [template(0, '09:00', '10:00')]
        winter = occurrences_for_date(templates, before)[0]
        summer = occurrences_for_date(templates, after)[0]
        self.assertEqual(winter.start.utcoffset(), timedelta(0))
        self.assertEqual(summer.start.utcoffset(), timedelta(hours=1))
        self.assertEqual(summer.end - summer.start, timedelta(hours=1))


class GenerateTimeSlotsTests(SimpleTestCase):
    def test_default_grid_has_sixteen_half_hours_per_day(self):
        slots = generate_time_slots(MONDAY, MONDAY + timedelta(days=1), 30, 9, 17)
        self.assertEqual(len(slots), 32)
        self.assertEqual(slots[0].start, at(MONDAY, '09:00'))
        self.assertEqual(slots[15].end, at(MONDAY, '17:00'))
        self.assertEqual(slots[16].start, at(MONDAY + timedelta(days=1), '09:00'))

    def test_every_slot_has_the_requested_length_inside_the_window(self):
        for slot in generate_time_slots(MONDAY, MONDAY, 45, 9, 17):
            self.assertEqual(slot.end - slot.start, timedelta(minutes=45))
            self.assertGreaterEqual(slot.start, at(MONDAY, '09:00'))
            self.assertLessEqual(slot.end, at(MONDAY, '17:00'))

    def test_overrunning_slot_is_dropped(self):
        self.assertEqual(len(generate_time_slots(MONDAY, MONDAY, 45, 9, 10)), 1)

    def test_end_before_start_yields_nothing(self):
        self.assertEqual(generate_time_slots(MONDAY, SUNDAY, 30, 9, 17), [])

    def test_invalid_parameters(self):
        with self.assertRaises(ValidationError):
            generate_time_slots(MONDAY, MONDAY, 0, 9, 17)
        with self.assertRaises(ValidationError):
            generate_time_slots(MONDAY, MONDAY, 30, 17, 9)

    @override_settings(OPERATING_HOURS_START=10, OPERATING_HOURS_END=12, OPERATING_SLOT_MINUTES=60)
    def test_operating_hour_slots_read_settings(self):
        slots = generate_operating_hour_slots(MONDAY, MONDAY)
        self.assertEqual([(s.start, s.end) for s in slots], [
            (at(MONDAY, '10:00'), at(MONDAY, '11:00')),
            (at(MONDAY, '11:00'), at(MONDAY, '12:00')),
        ])

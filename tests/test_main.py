import json

import pytest

import main


def run(capsys, *argv):
    code = main.main(list(argv))
    return code, capsys.readouterr().out


class TestInfo:

    def test_line_path(self, capsys):
        code, out = run(capsys, 'info', '--path-data', 'M 0 0 L 10 0')
        assert code == 0
        result = json.loads(out)
        assert result['length'] == 10.0
        assert result['segments'] == 1
        assert result['samples'] == 6
        assert result['jumps'] == []
        assert result['segment_ranges'] == [[0.0, 10.0]]

    def test_jumps_are_reported(self, capsys):
        code, out = run(capsys, 'info', '--path-data', 'M 0 0 L 10 0 M 20 0 L 30 0')
        assert code == 0
        (jump,) = json.loads(out)['jumps']
        # midway between the end of the first line and the first relaxed sample of the second
        assert 10.0 < jump < 12.0

    def test_circle_element(self, capsys):
        code, out = run(capsys, 'info', '--element', 'circle',
                        '--attr', 'cx=0', '--attr', 'cy=0', '--attr', 'r=10')
        assert code == 0
        result = json.loads(out)
        assert result['segments'] == 2
        assert result['jumps'] == []

    def test_sample_spacing(self, capsys):
        code, out = run(capsys, 'info', '--path-data', 'M 0 0 L 10 0', '--sample-spacing', '0.5')
        assert code == 0
        assert json.loads(out)['samples'] == 21


class TestSample:

    def test_evenly_spaced_points(self, capsys):
        code, out = run(capsys, 'sample', '--path-data', 'M 0 0 L 10 0', '--count', '3')
        assert code == 0
        rows = json.loads(out)
        assert [row['length'] for row in rows] == [0.0, 5.0, 10.0]
        assert [row['x'] for row in rows] == pytest.approx([0.0, 5.0, 10.0])
        assert all(row['y'] == 0.0 for row in rows)
        assert all(row['angle'] == 0.0 for row in rows)

    def test_approximate(self, capsys):
        code, out = run(capsys, 'sample', '--path-data', 'M 0 0 L 0 10', '--count', '5', '--approximate')
        assert code == 0
        rows = json.loads(out)
        assert [row['y'] for row in rows] == pytest.approx([0.0, 2.5, 5.0, 7.5, 10.0])
        assert rows[2]['angle'] == pytest.approx(1.5707963, rel=1e-6)


class TestErrors:

    def test_no_command(self, capsys):
        code, out = run(capsys)
        assert code == 1
        assert out == ''

    def test_no_source(self, capsys):
        assert run(capsys, 'info')[0] == 1

    def test_bad_path_data(self, capsys):
        code, out = run(capsys, 'info', '--path-data', 'M 0 0 X 5')
        assert code == 1
        assert out == ''

    def test_unsupported_command(self, capsys):
        assert run(capsys, 'info', '--path-data', 'M 0 0 A 5 5 0 0 1 10 0')[0] == 1

    def test_bad_attribute(self, capsys):
        assert run(capsys, 'info', '--element', 'line', '--attr', 'x2')[0] == 1

    def test_count_too_small(self, capsys):
        assert run(capsys, 'sample', '--path-data', 'M 0 0 L 10 0', '--count', '1')[0] == 1

    def test_bad_sample_spacing(self, capsys):
        assert run(capsys, 'info', '--path-data', 'M 0 0 L 10 0', '--sample-spacing', '0')[0] == 1


def test_build_path_prefers_element():
    path = main.build_path('M 0 0 L 1 0', 'line', ['x2=5'])
    assert path.get_total_length() == 5.0

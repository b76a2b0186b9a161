import pytest

from canarykit.jmeter import (
    JMeterFailure,
    check_logs,
    properties_args,
    system_properties_args,
)


def test_check_logs_sums_elapsed():
    log = "elapsed,success,failureMessage\n100,true,\n250,true,\n"
    assert check_logs(log) == 350


def test_check_logs_accepts_bytes_and_extra_columns():
    log = (
        b"timeStamp,elapsed,label,responseCode,success,failureMessage\n"
        b"1700000000000,40,home,200,true,\n"
        b"1700000000100,60,home,200,TRUE,\n"
    )
    assert check_logs(log) == 100


def test_check_logs_reports_failures():
    log = "elapsed,success,failureMessage\n10,false,boom\n20,true,\n30,false,bad\n"
    with pytest.raises(JMeterFailure) as info:
        check_logs(log)
    assert info.value.message == "\nboom\nbad"
    assert info.value.elapsed == 60
    assert str(info.value) == "\nboom\nbad"


def test_check_logs_rejects_bad_values():
    with pytest.raises(ValueError):
        check_logs("elapsed,success\nabc,true\n")
    with pytest.raises(ValueError):
        check_logs("elapsed,success\n5,maybe\n")


def test_check_logs_rejects_empty_log():
    with pytest.raises(ValueError):
        check_logs("")


def test_header_only_log_has_no_elapsed_time():
    assert check_logs("elapsed,success,failureMessage\n") == 0


def test_properties_args():
    assert properties_args(["a=1", "b=2"]) == " -Ja=1 -Jb=2"
    assert properties_args([]) == ""


def test_system_properties_args():
    assert system_properties_args(["x=y"]) == " -Dx=y"
    assert system_properties_args([]) == ""
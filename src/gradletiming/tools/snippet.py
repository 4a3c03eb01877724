"""Gradle listener that writes the timing logs gradletiming reads."""

DEFAULT_DIR_NAME = "buildings"
DEFAULT_MIN_DURATION_MS = 30

# Groovy uses both {} and ${}, so placeholders are @NAME@
_TEMPLATE = """\
class TimingsListener implements TaskExecutionListener, BuildListener {

    private static final DIR_NAME = "@DIR_NAME@"
    private Clock clock
    private timings = []

    @Override
    void beforeExecute(Task task) {
        clock = new org.gradle.util.Clock()
    }

    @Override
    void afterExecute(Task task, TaskState taskState) {
        def ms = clock.timeInMs
        timings.add([ms, task.path])
        task.project.logger.warn "${task.path} took ${ms}ms"
    }

    @Override
    void buildFinished(BuildResult result) {
        File outDir = new File(DIR_NAME)
        if (!outDir.exists()) {
            outDir.mkdirs();
        }
        File outFileCur = new File(DIR_NAME + "/out" + System.currentTimeMillis() + ".txt");
        String s = "------BUILD PROTOCOL------\\n"

        println "Task timings:"
        for (timing in timings) {
            if (timing[0] >= @MIN_DURATION_MS@) {

                printf "%7sms  %s\\n", timing

                s += String.format("%8s ms \\t %s\\n", timing[0], timing[1])

            }
        }
        outFileCur.write(s)
    }

    @Override
    void buildStarted(Gradle gradle) {}

    @Override
    void projectsEvaluated(Gradle gradle) {}

    @Override
    void projectsLoaded(Gradle gradle) {}

    @Override
    void settingsEvaluated(Settings settings) {}
}

gradle.addListener new TimingsListener()
"""


def render_snippet(
    dir_name: str = DEFAULT_DIR_NAME,
    min_duration_ms: int = DEFAULT_MIN_DURATION_MS,
) -> str:
    """Return the listener code to paste into build.gradle.

    Args:
        dir_name: Directory, relative to the Gradle project, that
            receives one out<millis>.txt file per build
        min_duration_ms: Tasks faster than this are left out of the
            file

    Returns:
        Groovy source text
    """
    if '"' in dir_name or "\\" in dir_name:
        raise ValueError(
            f"Directory name cannot contain quotes or backslashes: {dir_name!r}"
        )
    if min_duration_ms < 0:
        raise ValueError(
            f"Minimum duration must not be negative: {min_duration_ms}"
        )

    return (_TEMPLATE
        .replace("@DIR_NAME@", dir_name)
        .replace("@MIN_DURATION_MS@", str(min_duration_ms))
    )
